"""Pydantic schemas for LLM analysis output.

One model per structured analysis. The summary analysis is plain text and
has no schema. The models only check the reply's shape: extra keys are kept
and responses are dumped with exclude_unset, so the API returns what the
model sent.
"""

from __future__ import annotations

from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class Sentiment(BaseModel):
    model_config = ConfigDict(extra="allow")

    score: Union[int, float] = Field(..., description="1 (very negative) to 10 (very positive).")
    summary: str = Field(..., description="One-sentence explanation for the score.")


class ActionItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    task: str
    suggestedOwner: Optional[str] = None


class ActionItemsResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    actionItems: List[ActionItem]


class FlaggedMessage(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    ts: str
    reason: str


class MiscommunicationsResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    flaggedMessages: List[FlaggedMessage]
