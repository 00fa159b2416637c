import logging
from typing import Optional

from google import genai

from docconvert.core.config import settings
from docconvert.core.errors import ConfigurationError, ProcessingError

logger = logging.getLogger(__name__)


class AIService:
    """Proxy to Gemini so the API key never leaves the server."""

    def __init__(self, api_key: Optional[str] = None, default_model: Optional[str] = None):
        self._api_key = api_key
        self._default_model = default_model

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key if self._api_key is not None else settings.GEMINI_API_KEY

    @property
    def default_model(self) -> str:
        return self._default_model or settings.DEFAULT_AI_MODEL

    def build_client(self) -> genai.Client:
        if not self.api_key:
            raise ConfigurationError("Server API key not configured", stage="generate")
        return genai.Client(api_key=self.api_key)

    def generate(self, prompt: str, model: Optional[str] = None) -> str:
        client = self.build_client()
        model_name = model or self.default_model
        try:
            response = client.models.generate_content(model=model_name, contents=prompt)
        except Exception as exc:
            logger.error("Gemini request with model %s failed: %s", model_name, exc)
            raise ProcessingError("AI processing failed", stage="generate", detail=str(exc)) from exc
        return response.text or ""

ai_service = AIService()
