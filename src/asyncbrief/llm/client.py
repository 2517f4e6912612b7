"""OpenAI client wrapper.

One chat completion per call, no retries: the underlying client is built
with max_retries=0 and any API failure surfaces as openai.APIError.
"""

from typing import Optional
from openai import OpenAI
from ..config import get_settings
from ..log import get_logger

settings = get_settings()
logger = get_logger("llm_client")


class LLMClient:
    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key
        self._client = None

    @property
    def client(self) -> OpenAI:
        # Built on first use so importing the app does not require a key.
        if self._client is None:
            self._client = OpenAI(
                api_key=self._api_key or settings.OPENAI_API_KEY,
                max_retries=0,
            )
        return self._client

    def complete(self, prompt: str, model: Optional[str] = None, json_response: bool = False) -> Optional[str]:
        """
        Send a single user prompt and return the first choice's text.
        Returns None when the model produced no content.
        """
        kwargs = {}
        if json_response:
            kwargs["response_format"] = {"type": "json_object"}

        completion = self.client.chat.completions.create(
            model=model or settings.MODEL,
            messages=[
                {"role": "user", "content": prompt}
            ],
            **kwargs,
        )

        if not completion.choices:
            return None
        return completion.choices[0].message.content

llm_client = LLMClient()
