"""OpenAI-compatible chat completion client."""

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from outreach_assistant.config import Settings, get_settings
from outreach_assistant.errors import BackendError

logger = logging.getLogger(__name__)


class GenerationClient:
    """Issue single chat completion requests to the text generation backend."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Settings to read credentials and model names from.
            client: Preconstructed AsyncOpenAI client (tests pass their own).
            model: Model name override; defaults to settings.ai_model.
        """
        self.settings = settings or get_settings()
        self.client = client or AsyncOpenAI(
            api_key=self.settings.openai_api_key,
            base_url=self.settings.openai_base_url,
        )
        self.model = model or self.settings.ai_model

    async def complete(
        self,
        system_instruction: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        model: Optional[str] = None,
    ) -> str:
        """
        Run one completion.

        Returns:
            The raw response text (possibly empty).

        Raises:
            BackendError: on transport, auth or API errors.
        """
        model = model or self.model
        try:
            response = await self.client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except OpenAIError as e:
            logger.error(f"Generation request to {model} failed: {e}")
            raise BackendError(f"Generation error: {e}") from e

        if not response.choices:
            return ""
        content = response.choices[0].message.content or ""
        logger.info(f"Generation complete: model={model}, chars={len(content)}")
        return content.strip()
