"""
Working-copy routes.

Everything here acts on the edition and page currently open in the editor
session: page management, sections, blocks, AI assist, exports and the
upload compressor.
"""

import base64
import binascii
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from epaper.api.deps import domain_errors, get_context, get_current_user, get_editor
from epaper.api.routes.editions import publish_response
from epaper.api.schemas import (
    AddBlockRequest,
    AddSectionRequest,
    AssistResponse,
    CatalogResponse,
    CompressRequest,
    DataUrlResponse,
    ExportedImageResponse,
    ImageAssistRequest,
    MoveRequest,
    PublishResponse,
    TextAssistRequest,
    ThumbnailRequest,
    UpdatePayload,
    WorkspaceState,
)
from epaper.context import ServiceContext
from epaper.domain.entities import Block, Edition, Page, Section, User
from epaper.ports.generation import GenerationConfig
from epaper.ports.imaging import ImageProcessingError
from epaper.services.editor import EditorSession

router = APIRouter()


def _state(editor: EditorSession) -> WorkspaceState:
    return WorkspaceState(
        user=editor.current_user,
        edition=editor.current_edition,
        page=editor.current_page,
        error=editor.error,
    )


@router.get("", response_model=WorkspaceState)
def get_workspace(editor: EditorSession = Depends(get_editor)) -> Any:
    return _state(editor)


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog(ctx: ServiceContext = Depends(get_context)) -> Any:
    generation = ctx.rules.generation
    return CatalogResponse(
        catalog=ctx.rules.catalog,
        text_models=generation.text_models,
        image_models=generation.image_models,
    )


# --- Edition ---


@router.patch("", response_model=Edition)
def update_edition(
    updates: UpdatePayload = Body(...),
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.update_edition_details(updates)


@router.post("/save", response_model=Edition)
def save_edition(
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.save_edition()


@router.post("/publish", response_model=PublishResponse)
def publish_current(
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        output = editor.publish_current()
    return publish_response(output)


@router.post("/close", response_model=WorkspaceState)
def close_edition(editor: EditorSession = Depends(get_editor)) -> Any:
    editor.close_edition()
    return _state(editor)


# --- Pages ---


@router.post("/pages", response_model=Page)
def add_page(
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.add_page()


@router.delete("/pages/{page_id}", response_model=Edition)
def delete_page(
    page_id: str,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.delete_page(page_id)


@router.post("/pages/{page_id}/duplicate", response_model=Edition)
def duplicate_page(
    page_id: str,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.duplicate_page(page_id)


@router.post("/pages/{page_id}/move", response_model=Edition)
def move_page(
    page_id: str,
    request: MoveRequest,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.reorder_page(page_id, request.direction)


@router.post("/pages/{page_id}/open", response_model=Page)
def open_page(
    page_id: str,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.open_page(page_id)


@router.patch("/page", response_model=Page)
def update_page(
    updates: UpdatePayload = Body(...),
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.update_page_details(updates)


@router.put("/pages/{page_id}/thumbnail", response_model=Page)
def upload_thumbnail(
    page_id: str,
    request: ThumbnailRequest,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        page = editor.upload_page_thumbnail(page_id, request.data_url)
    if page is None:
        raise HTTPException(status_code=409, detail="Only the open page can be updated.")
    return page


@router.post("/pages/{page_id}/pdf", response_model=Page)
def upload_pdf(
    page_id: str,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        page = editor.upload_pdf_page(page_id)
    if page is None:
        raise HTTPException(status_code=409, detail="Only the open page can be updated.")
    return page


# --- Sections ---


@router.post("/sections", response_model=Section)
def add_section(
    request: AddSectionRequest,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.add_section(request.type, request.title)


@router.delete("/sections/{section_id}", response_model=Page)
def remove_section(
    section_id: str,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.remove_section(section_id)


# --- Blocks ---


@router.post("/sections/{section_id}/blocks", response_model=Block)
def add_block(
    section_id: str,
    request: AddBlockRequest,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        block = editor.add_block(section_id, request.kind)
    if block is None:
        raise HTTPException(status_code=404, detail="Section not found.")
    return block


@router.patch("/sections/{section_id}/blocks/{block_id}", response_model=Page)
def update_block(
    section_id: str,
    block_id: str,
    updates: UpdatePayload = Body(...),
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.update_block(section_id, block_id, updates)


@router.delete("/sections/{section_id}/blocks/{block_id}", response_model=Page)
def remove_block(
    section_id: str,
    block_id: str,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.remove_block(section_id, block_id)


@router.post("/sections/{section_id}/blocks/{block_id}/move", response_model=Page)
def move_block(
    section_id: str,
    block_id: str,
    request: MoveRequest,
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.move_block(section_id, block_id, request.direction)


# --- Assist ---


def _assist_result(applied: bool, editor: EditorSession) -> AssistResponse:
    return AssistResponse(applied=applied, error=editor.error, page=editor.current_page)


@router.post("/sections/{section_id}/blocks/{block_id}/assist/headline", response_model=AssistResponse)
def assist_headline(
    section_id: str,
    block_id: str,
    request: TextAssistRequest,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        applied = ctx.assist_service.generate_headline(
            ctx.editor, section_id, block_id, request.content
        )
    return _assist_result(applied, ctx.editor)


@router.post("/sections/{section_id}/blocks/{block_id}/assist/summary", response_model=AssistResponse)
def assist_summary(
    section_id: str,
    block_id: str,
    request: TextAssistRequest,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        applied = ctx.assist_service.generate_summary(
            ctx.editor, section_id, block_id, request.content
        )
    return _assist_result(applied, ctx.editor)


@router.post("/sections/{section_id}/blocks/{block_id}/assist/image", response_model=AssistResponse)
def assist_image(
    section_id: str,
    block_id: str,
    request: ImageAssistRequest,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        applied = ctx.assist_service.generate_image(
            ctx.editor, section_id, block_id, request.description
        )
    return _assist_result(applied, ctx.editor)


@router.get("/generation-config", response_model=GenerationConfig)
def get_generation_config(editor: EditorSession = Depends(get_editor)) -> Any:
    return editor.generation_config


@router.put("/generation-config", response_model=GenerationConfig)
def configure_generation(
    updates: UpdatePayload = Body(...),
    editor: EditorSession = Depends(get_editor),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return editor.configure_generation(updates)


# --- Images ---


@router.post("/export/images", response_model=list[ExportedImageResponse])
def export_images(
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        images = ctx.export_service.export_images(ctx.editor.current_edition)
    return [ExportedImageResponse(filename=i.filename, data_url=i.data_url) for i in images]


@router.post("/images/compress", response_model=DataUrlResponse)
def compress_image(
    request: CompressRequest,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    try:
        data = base64.b64decode(request.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(status_code=400, detail="Image data is not valid base64.") from e

    images = ctx.rules.images
    try:
        data_url = ctx.image_processor.compress_image(
            data,
            request.max_width or images.max_width,
            request.quality or images.quality,
        )
    except ImageProcessingError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return DataUrlResponse(data_url=data_url)
