"""
Gemini client (TextGeneratorPort + ImageGeneratorPort) on the google-genai SDK.

Every fault (missing key, API error, transport error) is raised as
GenerationError; there is no retry.
"""

from __future__ import annotations

import base64
import logging
import os
from collections.abc import Sequence
from typing import Any

import httpx
from google import genai
from google.genai import errors, types

from epaper.ports.generation import GeneratedText, GenerationConfig, GenerationError

logger = logging.getLogger(__name__)

DEFAULT_KEY_ENV = ("API_KEY", "GEMINI_API_KEY")
# Only the pro image model accepts an explicit output size.
SIZED_IMAGE_MODELS = {"gemini-3-pro-image-preview": "1K"}


def resolve_api_key(env_names: Sequence[str] = DEFAULT_KEY_ENV) -> str | None:
    for name in env_names:
        if value := os.environ.get(name):
            return value
    return None


class GeminiClient:
    def __init__(self, api_key: str | None = None, *, client: Any = None) -> None:
        self._api_key = api_key
        self._client = client

    def _models(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise GenerationError(
                    "API_KEY is not defined. Please ensure it's set in your environment."
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client.models

    def _generate(self, model: str, prompt: str, config: types.GenerateContentConfig) -> Any:
        models = self._models()
        try:
            return models.generate_content(model=model, contents=prompt, config=config)
        except (errors.APIError, httpx.HTTPError) as e:
            raise GenerationError(str(e)) from e

    def generate_text(self, prompt: str, config: GenerationConfig) -> GeneratedText:
        request = types.GenerateContentConfig(
            temperature=config.temperature,
            top_k=config.top_k,
            top_p=config.top_p,
        )
        try:
            response = self._generate(config.model_name, prompt, request)
        except GenerationError as e:
            logger.error("Text generation with %s failed: %s", config.model_name, e)
            raise GenerationError(f"Gemini Text Generation failed: {e}") from e

        text = response.text or ""
        logger.info("Generated %d characters with %s", len(text), config.model_name)
        return GeneratedText(text=text)

    def generate_image(self, prompt: str, config: GenerationConfig) -> str | None:
        model = config.image_model_name
        image_config = types.ImageConfig(
            aspect_ratio="1:1", image_size=SIZED_IMAGE_MODELS.get(model)
        )
        request = types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"],
            image_config=image_config,
        )
        try:
            response = self._generate(model, prompt, request)
        except GenerationError as e:
            logger.error("Image generation with %s failed: %s", model, e)
            raise GenerationError(f"Gemini Image Generation failed: {e}") from e

        candidates = response.candidates or []
        parts = (candidates[0].content.parts or []) if candidates and candidates[0].content else []
        for part in parts:
            blob = part.inline_data
            if blob is not None and blob.data:
                mime = blob.mime_type or "image/png"
                logger.info("Generated %s image with %s", mime, model)
                encoded = base64.b64encode(blob.data).decode("ascii")
                return f"data:{mime};base64,{encoded}"

        logger.info("Image model %s returned no image payload", model)
        return None
