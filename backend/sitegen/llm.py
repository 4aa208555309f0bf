"""
LLM module for handling completion API interactions
"""

from typing import List, Optional

import openai

import config
from sitegen.errors import EmptyResponse, UpstreamError
from sitegen.logger import get_logger
from sitegen.prompt import build_prompts
from sitegen.repair import repair_response

logger = get_logger(__name__)


class CompletionClient:
    """Thin wrapper around an OpenAI-compatible chat completion endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        client=None,
    ):
        self.api_key = api_key if api_key is not None else config.OPENAI_API_KEY
        self.base_url = base_url if base_url is not None else config.OPENAI_BASE_URL
        self.model = model or config.OPENAI_MODEL
        self.temperature = (
            temperature if temperature is not None else config.OPENAI_TEMPERATURE
        )
        self.max_tokens = max_tokens or config.OPENAI_MAX_TOKENS
        self._client = client

    def _get_client(self):
        # Built on first use so the server starts without credentials
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one chat completion request and return the first choice's text"""
        logger.info(f"Calling completion API with model: {self.model}")
        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as e:
            logger.error(
                f"Completion API error: status={e.status_code} type={e.type}: {e.message}"
            )
            raise UpstreamError(e.message, status=e.status_code, type=e.type) from e
        except openai.OpenAIError as e:
            logger.error(f"Completion API error: {str(e)}")
            raise UpstreamError(str(e), type=getattr(e, "type", None)) from e

        if getattr(response, "usage", None):
            logger.info(f"Usage: {response.usage}")

        if not response.choices or not response.choices[0].message.content:
            logger.error("Completion API returned no content")
            raise EmptyResponse()

        text = response.choices[0].message.content
        logger.info(f"Received response, length {len(text)}: {text[:200]}...")
        return text


def generate_site_payload(
    description: str,
    client: CompletionClient,
    pages: Optional[List[str]] = None,
    style: Optional[str] = None,
) -> dict:
    """Prompt the model for a website and return its repaired JSON payload"""
    system, user = build_prompts(description, pages=pages, style=style)
    text = client.complete(system, user)
    return repair_response(text)
