"""
MLflow tracing integration for LLM observability.
Provides span-based tracing around analysis runs and their LLM calls.
"""
import logging
import time
from typing import Optional, Dict, Any
from contextlib import ExitStack, contextmanager

import mlflow

from ..config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class MLflowTracer:
    """Handles MLflow tracing for LLM observability."""

    def __init__(self):
        self.enabled = settings.MLFLOW_ENABLE_TRACING
        if self.enabled:
            try:
                mlflow.set_tracking_uri(settings.MLFLOW_TRACKING_URI)
                logger.info("MLflow tracing enabled")
            except Exception as e:
                logger.warning(f"Failed to initialize MLflow tracing: {e}")
                self.enabled = False
        else:
            logger.debug("MLflow tracing disabled")

    @contextmanager
    def span(
        self,
        name: str,
        span_type: str = "UNKNOWN",
        attributes: Optional[Dict[str, Any]] = None,
        inputs: Optional[Dict[str, Any]] = None
    ):
        """
        Create a traced span for an operation.

        Args:
            name: Name of the span (e.g., "analysis.sentiment", "llm.complete")
            span_type: Type of span (e.g., "LLM", "CHAIN")
            attributes: Additional metadata for the span
            inputs: Input data to the operation
        """
        if not self.enabled:
            yield None
            return

        # Only span setup is guarded; errors from the traced body propagate.
        stack = ExitStack()
        try:
            span = stack.enter_context(mlflow.start_span(name=name, span_type=span_type))
            if attributes:
                span.set_attributes(attributes)
            if inputs:
                span.set_inputs(inputs)
        except Exception as e:
            stack.close()
            logger.warning(f"Failed to open span {name}: {e}")
            yield None
            return

        with stack:
            start_time = time.time()
            yield span
            try:
                elapsed = time.time() - start_time
                span.set_attribute("latency_ms", int(elapsed * 1000))
            except Exception as e:
                logger.warning(f"Failed to record latency for {name}: {e}")

    def trace_llm_call(
        self,
        span: Any,
        model: str,
        prompt: str,
        response: Optional[str],
    ):
        """Log details of an LLM call on the given span."""
        if not self.enabled or span is None:
            return

        try:
            span.set_attributes({
                "model": model,
                "prompt_length": len(prompt),
                "response_length": len(response or ""),
                "empty_response": not response,
            })
        except Exception as e:
            logger.warning(f"Failed to trace LLM call: {e}")


# Global tracer instance
tracer = MLflowTracer()
