"""
Gemini text generation through the google-genai SDK.
"""
from typing import Optional
import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from eventora.core.config import settings
from eventora.core.logging import logger


class LLMServiceError(Exception):
    """The language model could not produce a usable reply."""


class GeminiService:
    """Thin async wrapper around a Gemini model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
    ):
        self.api_key = api_key
        self.model = model or settings.GEMINI_MODEL
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client: Optional[genai.Client] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate(self, prompt: str) -> str:
        """
        Send a single-turn prompt and return the reply text.

        Raises:
            LLMServiceError: If the key is missing, the API call fails or the reply is empty
        """
        if not self.configured:
            raise LLMServiceError("GEMINI_API_KEY is not set in environment variables")

        config = types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            safety_settings=[
                types.SafetySetting(
                    category=types.HarmCategory.HARM_CATEGORY_HARASSMENT,
                    threshold=types.HarmBlockThreshold.BLOCK_NONE,
                ),
                types.SafetySetting(
                    category=types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
                    threshold=types.HarmBlockThreshold.BLOCK_NONE,
                ),
            ],
        )

        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            message = str(e)
            if "API_KEY_INVALID" in message or "API key not valid" in message:
                raise LLMServiceError("Invalid Gemini API key") from e
            raise LLMServiceError(f"Gemini request failed: {message}") from e
        except httpx.HTTPError as e:
            raise LLMServiceError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise LLMServiceError(f"Unexpected response from Gemini: {e}") from e

        if response.candidates:
            logger.debug(f"Gemini finish reason: {response.candidates[0].finish_reason}")

        text = response.text
        if not text:
            raise LLMServiceError("Empty response from Gemini")

        logger.debug(f"Gemini response start: {text[:200]}")
        return text
