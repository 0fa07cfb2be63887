"""Demo editions loaded into a fresh collection when ops.seed_demo_editions is on."""

from datetime import datetime, timedelta

from epaper.domain.entities import ArticleBlock, Edition, ImageBlock, Page, Section


def _article(block_id: str, headline: str, sub: str, content: str, category: str,
             location: str, byline: str = "By Editor User") -> ArticleBlock:
    return ArticleBlock(
        id=block_id,
        headline=headline,
        sub_headline=sub,
        content=content,
        byline=byline,
        category=category,
        location=location,
    )


def demo_editions(now: datetime) -> list[Edition]:
    front = Page(
        id="page-1-1",
        page_number=1,
        thumbnail="",
        sections=[
            Section(
                id="sec-1-1",
                type="main-news",
                title="Top Stories",
                blocks=[
                    _article(
                        "art-1-1",
                        "Local Hero Saves Cat",
                        "Feline rescued from tall tree.",
                        "A brave citizen rescued a cat from a tree...",
                        "Local News",
                        "Hyderabad",
                    )
                ],
            )
        ],
    )
    sports = Page(
        id="page-1-2",
        page_number=2,
        thumbnail="",
        sections=[
            Section(
                id="sec-1-2",
                type="sports",
                title="Cricket Highlights",
                blocks=[
                    _article(
                        "art-1-2",
                        "Team Wins Championship",
                        "Historic victory in the finals.",
                        "The local team celebrated a historic victory...",
                        "Sports",
                        "Chennai",
                    ),
                    ImageBlock(
                        id="img-1-1",
                        image_url="https://picsum.photos/400/250",
                        caption="Winning moment",
                        width="w-1/2",
                        height="h-48",
                    ),
                ],
            )
        ],
    )

    return [
        Edition(
            id="edition-1",
            title="Daily News - April 23, 2024",
            pages=[front, sports],
            language="en",
            status="Published",
            created_by="Admin User",
            last_modified=now,
        ),
        Edition(
            id="edition-2",
            title="Sports Weekly - Draft A",
            pages=[
                Page(
                    id="page-2-1",
                    page_number=1,
                    thumbnail="",
                    sections=[
                        Section(
                            id="sec-2-1",
                            type="sports",
                            title="Cricket Highlights",
                            blocks=[
                                _article(
                                    "art-2-1",
                                    "Team Wins Championship",
                                    "Historic victory.",
                                    "The local team celebrated a historic victory...",
                                    "Sports",
                                    "Hyderabad",
                                )
                            ],
                        )
                    ],
                )
            ],
            language="te",
            status="Draft",
            created_by="Editor User",
            last_modified=now,
        ),
        Edition(
            id="edition-3",
            title="Editorial - Pending Review",
            pages=[
                Page(
                    id="page-3-1",
                    page_number=1,
                    thumbnail="",
                    sections=[
                        Section(
                            id="sec-3-1",
                            type="editorial",
                            title="Opinion Piece",
                            blocks=[
                                _article(
                                    "art-3-1",
                                    "Future of AI",
                                    "Impact on daily life.",
                                    "Exploring the impact of artificial intelligence...",
                                    "Technology",
                                    "Bengaluru",
                                    byline="By Admin User",
                                )
                            ],
                        )
                    ],
                )
            ],
            language="hi",
            scheduled_publish_date=now + timedelta(days=1),
            status="Pending Approval",
            created_by="Admin User",
            last_modified=now,
        ),
    ]
