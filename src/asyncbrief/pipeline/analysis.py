"""Parameterized analysis pipeline.

Every analysis has the same shape: read the recent message window, render a
prompt, make one LLM call and parse the reply. The variants only differ in
the AnalysisSpec they pass in (see pipeline/variants.py).
"""

import re
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Type

import openai
from pydantic import BaseModel, ValidationError

from ..config import get_settings
from ..errors import (
    AnalysisFailed,
    DataUnavailable,
    MalformedUpstreamResponse,
    StoreUnavailable,
    UpstreamError,
)
from ..llm.client import LLMClient, llm_client
from ..llm.prompts import load_prompt
from ..mlops.tracing import MLflowTracer, tracer
from ..schemas.messages import ChatMessage
from ..store.repo import Repo

logger = logging.getLogger("pipeline")

_FENCE_START = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_END = re.compile(r"\n?```\s*$")


@dataclass(frozen=True)
class AnalysisSpec:
    """
    Configuration record for one analysis variant.

    output_model is None for free-text analyses; the raw reply is then the
    result. fallback is returned when the model replies with no text.
    swallow_upstream_errors turns every failure after the store read into
    the fallback instead of an error (summary only).
    """
    name: str
    output_model: Optional[Type[BaseModel]]
    fallback: Callable[[], Any]
    to_response: Callable[[Any], dict]
    error_message: str
    swallow_upstream_errors: bool = False
    check: Optional[Callable[[Any, List[ChatMessage]], None]] = None

    @property
    def json_response(self) -> bool:
        return self.output_model is not None


def strip_code_fences(raw_text: str) -> str:
    """Strip markdown fences (```json ... ``` or ``` ... ```)."""
    stripped = _FENCE_START.sub("", raw_text.strip())
    return _FENCE_END.sub("", stripped).strip()


class AnalysisPipeline:
    def __init__(self, repo=Repo, client: LLMClient = llm_client, tracer: MLflowTracer = tracer):
        self.repo = repo
        self.client = client
        self.tracer = tracer

    def load_window(self, spec: AnalysisSpec) -> List[ChatMessage]:
        settings = get_settings()
        try:
            messages = self.repo.recent_messages(settings.ANALYSIS_WINDOW, ascending=True)
        except StoreUnavailable as e:
            raise DataUnavailable(spec.name, f"Could not fetch messages: {e}") from e
        if not messages:
            raise DataUnavailable(spec.name, "No messages to analyze")
        return messages

    def call_upstream(self, spec: AnalysisSpec, prompt: str) -> Optional[str]:
        settings = get_settings()
        with self.tracer.span(f"llm.{spec.name}", span_type="LLM", inputs={"prompt": prompt}) as span:
            try:
                raw_text = self.client.complete(prompt, json_response=spec.json_response)
            except openai.OpenAIError as e:
                raise UpstreamError(spec.name, f"LLM call failed: {e}") from e
            self.tracer.trace_llm_call(span, model=settings.MODEL, prompt=prompt, response=raw_text)
        return raw_text

    def parse(self, spec: AnalysisSpec, raw_text: str) -> Any:
        if spec.output_model is None:
            return raw_text
        try:
            return spec.output_model.model_validate_json(strip_code_fences(raw_text))
        except ValidationError as e:
            raise MalformedUpstreamResponse(spec.name, f"Unparseable LLM payload: {e}") from e

    def analyze(self, spec: AnalysisSpec, messages: List[ChatMessage]) -> Any:
        prompt = load_prompt(spec.name).render(messages)
        logger.info(f"Running {spec.name} analysis over {len(messages)} messages")

        raw_text = self.call_upstream(spec, prompt)
        if not raw_text:
            logger.info(f"Empty LLM payload for {spec.name}, using fallback")
            return spec.fallback()
        result = self.parse(spec, raw_text)

        if spec.check is not None:
            spec.check(result, messages)
        return result

    def run(self, spec: AnalysisSpec) -> Any:
        """
        Run one analysis end to end.

        Raises:
            DataUnavailable: the store read failed or the window is empty
            UpstreamError: the LLM call failed
            MalformedUpstreamResponse: the reply did not match the output shape
            AnalysisFailed: anything else went wrong (prompt files, tracing, ...)
        """
        with self.tracer.span(f"analysis.{spec.name}", span_type="CHAIN"):
            messages = self.load_window(spec)

            try:
                return self.analyze(spec, messages)
            except (UpstreamError, MalformedUpstreamResponse) as e:
                if not spec.swallow_upstream_errors:
                    raise
                logger.warning(f"{e}; returning fallback")
                return spec.fallback()
            except Exception as e:
                logger.exception(f"{spec.name} analysis failed")
                if spec.swallow_upstream_errors:
                    return spec.fallback()
                raise AnalysisFailed(spec.name, str(e)) from e

    def respond(self, spec: AnalysisSpec) -> dict:
        return spec.to_response(self.run(spec))


pipeline = AnalysisPipeline()
