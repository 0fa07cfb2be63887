"""
AI-assisted writing for the open page.

Each helper builds a language-aware prompt, calls the generator and writes
the result into the target block through the editor session. A generator
failure is stored as the session banner (``session.error``) and the edition
is left as it was; calling again retries.
"""

from __future__ import annotations

import logging

from epaper.domain.entities import ArticleBlock, ImageBlock
from epaper.ports.generation import GenerationError, ImageGeneratorPort, TextGeneratorPort
from epaper.services.editor import EditorSession

logger = logging.getLogger(__name__)


class AssistService:
    def __init__(self, text_generator: TextGeneratorPort, image_generator: ImageGeneratorPort):
        self.text_generator = text_generator
        self.image_generator = image_generator

    @staticmethod
    def _language(session: EditorSession) -> str:
        language = (
            session.current_edition.language
            if session.current_edition
            else session.rules.catalog.default_language
        )
        return session.rules.catalog.prompt_language(language)

    def generate_headline(
        self, session: EditorSession, section_id: str, block_id: str, content: str
    ) -> bool:
        prompt = (
            "Generate a concise and engaging newspaper headline (max 10 words) in "
            f"{self._language(session)} for the following article content:\n\n{content}"
        )
        session.error = None
        try:
            result = self.text_generator.generate_text(prompt, session.generation_config)
        except GenerationError as e:
            logger.exception("Headline generation failed")
            session.error = f"Failed to generate headline: {e}"
            return False

        session.update_block(
            section_id, block_id, {"headline": result.text or "Generated Headline"}
        )
        return True

    def generate_summary(
        self, session: EditorSession, section_id: str, block_id: str, content: str
    ) -> bool:
        prompt = (
            "Summarize the following article content into 2-3 sentences in "
            f"{self._language(session)}:\n\n{content}"
        )
        session.error = None
        try:
            result = self.text_generator.generate_text(prompt, session.generation_config)
        except GenerationError as e:
            logger.exception("Summary generation failed")
            session.error = f"Failed to generate summary: {e}"
            return False

        session.update_block(section_id, block_id, {"content": result.text or "Generated Summary"})
        return True

    def generate_image(
        self, session: EditorSession, section_id: str, block_id: str, description: str
    ) -> bool:
        """
        Generate an image for an image block (``image_url``) or an article
        (``article_image_url``). Returns False when nothing was applied.
        """
        prompt = (
            "Generate an image based on this description, considering the context is "
            f"an e-paper in {self._language(session)}: {description}"
        )
        session.error = None
        try:
            image_url = self.image_generator.generate_image(prompt, session.generation_config)
        except GenerationError as e:
            logger.exception("Image generation failed")
            session.error = f"Failed to generate image: {e}"
            return False

        if not image_url:
            return False

        match session.find_block(section_id, block_id):
            case ImageBlock():
                session.update_block(section_id, block_id, {"image_url": image_url})
            case ArticleBlock():
                session.update_block(section_id, block_id, {"article_image_url": image_url})
            case _:
                return False
        return True
