"""
Block mutation functions.

Every function takes a Section and returns a new Section; the input is never
mutated. Lookups by an unknown block id are no-ops that hand back the
section unchanged.
"""

from collections.abc import Mapping
from typing import Any

from epaper.domain.entities import (
    AdBlock,
    ArticleBlock,
    Block,
    ImageBlock,
    MoveDirection,
    Section,
    field_aliases,
    new_id,
)
from epaper.rules.models import BlockDefaultsRules

IMMUTABLE_BLOCK_FIELDS = ("id", "type")


def _index_of(section: Section, block_id: str) -> int:
    for i, block in enumerate(section.blocks):
        if block.id == block_id:
            return i
    return -1


def merge_block(block: Block, updates: Mapping[str, Any]) -> Block:
    """
    Return a copy of ``block`` with ``updates`` merged over it.

    Raises:
        ValueError: if an update targets id/type or a field that does not
            belong to this block kind.
    """
    names = field_aliases(type(block))
    data = block.model_dump()

    for key, value in updates.items():
        field = names.get(key)
        if field is None:
            raise ValueError(f"Field '{key}' is not valid for {block.type} blocks.")
        if field in IMMUTABLE_BLOCK_FIELDS:
            if value != getattr(block, field):
                raise ValueError(f"Block field '{field}' cannot be changed.")
            continue
        data[field] = value

    return type(block).model_validate(data)


def update_block(section: Section, block_id: str, updates: Mapping[str, Any]) -> Section:
    idx = _index_of(section, block_id)
    if idx == -1:
        return section

    blocks = list(section.blocks)
    blocks[idx] = merge_block(blocks[idx], updates)
    return section.model_copy(update={"blocks": blocks})


def create_block(kind: str, author_name: str | None, defaults: BlockDefaultsRules) -> Block:
    """Build a new block of ``kind`` populated with the configured defaults."""
    match kind:
        case "article":
            d = defaults.article
            return ArticleBlock(
                id=new_id("article"),
                headline=d.headline,
                sub_headline="",
                content=d.content,
                byline=f"By {author_name or 'Editor'}",
                category=d.category,
                location="",
                article_image_url="",
                text_alignment="left",
                font_size=d.font_size,
                line_spacing=d.line_spacing,
                width=d.width,
                height=d.height,
                rotation=0,
            )
        case "image":
            i = defaults.image
            return ImageBlock(
                id=new_id("image"),
                image_url=i.image_url,
                caption=i.caption,
                width=i.width,
                height=i.height,
                rotation=0,
            )
        case "ad":
            a = defaults.ad
            return AdBlock(
                id=new_id("ad"),
                ad_content=a.ad_content,
                ad_image_url=a.ad_image_url,
                target_url=a.target_url,
                width=a.width,
                height=a.height,
                rotation=0,
            )
        case _:
            raise ValueError(f"Unknown block kind '{kind}'.")


def add_block(
    section: Section,
    kind: str,
    author_name: str | None,
    defaults: BlockDefaultsRules,
) -> tuple[Section, Block]:
    """Append a new block; returns the new section and the created block."""
    block = create_block(kind, author_name, defaults)
    return section.model_copy(update={"blocks": [*section.blocks, block]}), block


def remove_block(section: Section, block_id: str) -> Section:
    blocks = [b for b in section.blocks if b.id != block_id]
    return section.model_copy(update={"blocks": blocks})


def move_block(section: Section, block_id: str, direction: MoveDirection) -> Section:
    """
    Move a block one position up or down.

    At either boundary the block is taken out and put back at the same
    index: the order is unchanged but a new list is produced.
    """
    if direction not in ("up", "down"):
        raise ValueError(f"Invalid direction '{direction}'.")

    idx = _index_of(section, block_id)
    if idx == -1:
        return section

    blocks = list(section.blocks)
    moved = blocks.pop(idx)

    if direction == "up" and idx > 0:
        blocks.insert(idx - 1, moved)
    elif direction == "down" and idx < len(blocks):
        blocks.insert(idx + 1, moved)
    else:
        blocks.insert(idx, moved)

    return section.model_copy(update={"blocks": blocks})


def clone_block(block: Block) -> Block:
    """Copy a block verbatim under a freshly generated id."""
    return block.model_copy(update={"id": new_id(block.type)})
