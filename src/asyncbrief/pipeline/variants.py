"""The four analysis variants served by the API."""

import logging
from typing import List

from ..llm.schema import ActionItemsResult, MiscommunicationsResult, Sentiment
from ..schemas.messages import ChatMessage
from .analysis import AnalysisSpec

logger = logging.getLogger("pipeline")

NO_SUMMARY = "No summary available."


def warn_unknown_ts(result: MiscommunicationsResult, messages: List[ChatMessage]):
    """Flagged ts values should come from the analyzed window; not enforced."""
    known = {m.ts for m in messages}
    for flagged in result.flaggedMessages:
        if flagged.ts not in known:
            logger.warning(f"Flagged message references unknown ts {flagged.ts!r}")


SUMMARY = AnalysisSpec(
    name="summary",
    output_model=None,
    fallback=lambda: NO_SUMMARY,
    to_response=lambda text: {"summary": text},
    error_message="Failed to summarize messages",
    swallow_upstream_errors=True,
)

SENTIMENT = AnalysisSpec(
    name="sentiment",
    output_model=Sentiment,
    fallback=lambda: None,
    to_response=lambda result: {"sentiment": result.model_dump(exclude_unset=True) if result else None},
    error_message="Failed to analyze sentiment",
)

ACTION_ITEMS = AnalysisSpec(
    name="actionItems",
    output_model=ActionItemsResult,
    fallback=lambda: ActionItemsResult(actionItems=[]),
    to_response=lambda result: result.model_dump(exclude_unset=True),
    error_message="Failed to generate action items",
)

MISCOMMUNICATIONS = AnalysisSpec(
    name="miscommunications",
    output_model=MiscommunicationsResult,
    fallback=lambda: MiscommunicationsResult(flaggedMessages=[]),
    to_response=lambda result: result.model_dump(exclude_unset=True),
    error_message="Failed to analyze messages",
    check=warn_unknown_ts,
)

VARIANTS = {spec.name: spec for spec in (SUMMARY, SENTIMENT, ACTION_ITEMS, MISCOMMUNICATIONS)}
