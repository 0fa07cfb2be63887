from datetime import UTC, datetime
from pathlib import Path

import pytest

from epaper.adapters.clock import FixedClock
from epaper.adapters.memory_repo import InMemoryEditionRepo
from epaper.domain.entities import (
    ArticleBlock,
    Edition,
    ImageBlock,
    Page,
    Section,
    User,
)
from epaper.rules.loader import load_rules
from epaper.services.editor import EditorSession
from epaper.services.publish import PublishService

NOW = datetime(2024, 4, 23, 9, 30, tzinfo=UTC)


@pytest.fixture(scope="session")
def rules():
    # Load REAL rules from project root
    rules_path = Path(__file__).resolve().parent.parent / "rules.yaml"
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def repo():
    return InMemoryEditionRepo()


@pytest.fixture
def admin():
    return User(id="user-admin", name="Admin User", role="Admin")


@pytest.fixture
def editor_user():
    return User(id="user-editor", name="Editor User", role="Editor")


@pytest.fixture
def section():
    return Section(
        id="sec-1",
        type="main-news",
        title="Top Stories",
        blocks=[
            ArticleBlock(id="art-1", headline="First", content="Body one"),
            ImageBlock(id="img-1", image_url="https://example.com/a.png", caption="A"),
            ArticleBlock(id="art-2", headline="Third", content="Body three"),
        ],
    )


@pytest.fixture
def edition(section):
    return Edition(
        id="edition-1",
        title="Daily News",
        pages=[
            Page(id="page-1", page_number=1, sections=[section]),
            Page(id="page-2", page_number=2, sections=[]),
            Page(id="page-3", page_number=3, sections=[]),
        ],
        created_by="Editor User",
        last_modified=datetime(2024, 4, 1, tzinfo=UTC),
    )


@pytest.fixture
def session(repo, clock, rules, editor_user):
    return EditorSession(repo, clock, rules, PublishService(repo, clock), user=editor_user)
