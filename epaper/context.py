from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from epaper.adapters.clock import SystemClock
from epaper.adapters.gemini import GeminiClient, resolve_api_key
from epaper.adapters.imaging import ImageProcessor
from epaper.adapters.memory_repo import InMemoryEditionRepo
from epaper.adapters.token_store import JsonFileTokenStore
from epaper.ports.clock import ClockPort
from epaper.ports.generation import ImageGeneratorPort, TextGeneratorPort
from epaper.ports.imaging import ImageProcessorPort
from epaper.ports.repo import EditionRepoPort, TokenStorePort
from epaper.rules.models import Rules
from epaper.services.assist import AssistService
from epaper.services.auth import AuthService
from epaper.services.editor import EditorSession
from epaper.services.export import ExportService
from epaper.services.publish import PublishService
from epaper.services.seed import demo_editions

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    """Everything one editor process needs, wired once and passed explicitly."""

    rules: Rules
    clock: ClockPort
    edition_repo: EditionRepoPort
    token_store: TokenStorePort
    image_processor: ImageProcessorPort
    auth_service: AuthService
    publish_service: PublishService
    assist_service: AssistService
    export_service: ExportService
    editor: EditorSession

    @classmethod
    def create(
        cls,
        rules: Rules,
        data_dir: str | Path | None = None,
        *,
        clock: ClockPort | None = None,
        token_store: TokenStorePort | None = None,
        text_generator: TextGeneratorPort | None = None,
        image_generator: ImageGeneratorPort | None = None,
        image_processor: ImageProcessorPort | None = None,
    ) -> ServiceContext:
        clock = clock or SystemClock()

        if token_store is None:
            base = data_dir or os.environ.get(rules.ops.data_dir_env, rules.ops.default_data_dir)
            token_store = JsonFileTokenStore(Path(base) / "session.json")

        if text_generator is None or image_generator is None:
            gemini = GeminiClient(resolve_api_key(rules.generation.api_key_env))
            text_generator = text_generator or gemini
            image_generator = image_generator or gemini

        repo = InMemoryEditionRepo()
        if rules.ops.seed_demo_editions:
            for edition in demo_editions(clock.now()):
                repo.save(edition)
            logger.info("Seeded %d demo editions", len(repo.list_editions()))

        image_processor = image_processor or ImageProcessor()
        auth_service = AuthService(token_store, rules.auth)
        publish_service = PublishService(repo, clock)
        editor = EditorSession(repo, clock, rules, publish_service, user=auth_service.restore())

        return cls(
            rules=rules,
            clock=clock,
            edition_repo=repo,
            token_store=token_store,
            image_processor=image_processor,
            auth_service=auth_service,
            publish_service=publish_service,
            assist_service=AssistService(text_generator, image_generator),
            export_service=ExportService(image_processor, rules.images),
            editor=editor,
        )
