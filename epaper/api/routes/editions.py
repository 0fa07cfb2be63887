"""
Edition collection routes (the dashboard).

Listing, creation, opening an edition as the working copy, and the
publish/approve actions that work on an edition by id.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from epaper.api.deps import domain_errors, get_context, get_current_user
from epaper.api.schemas import (
    CreateEditionRequest,
    EditionSummary,
    PublishResponse,
    WorkspaceState,
)
from epaper.context import ServiceContext
from epaper.domain.entities import EDITION_STATUSES, Edition, User
from epaper.domain.policy import available_actions
from epaper.services.publish import PublishOutput

router = APIRouter()

ERROR_STATUS = {
    "NOT_AUTHENTICATED": 401,
    "PERMISSION_DENIED": 403,
    "EDITION_NOT_FOUND": 404,
}


def publish_response(output: PublishOutput) -> PublishResponse:
    """Raise for rejected requests, otherwise build the response body."""
    if not output.success:
        code = output.errors[0].code if output.errors else ""
        raise HTTPException(
            status_code=ERROR_STATUS.get(code, 400),
            detail={
                "errors": [
                    {"code": e.code, "message": e.message, "field": e.field}
                    for e in output.errors
                ]
            },
        )
    return PublishResponse.from_output(output)


def to_summary(edition: Edition, user: User) -> EditionSummary:
    return EditionSummary(
        id=edition.id,
        title=edition.title,
        language=edition.language,
        status=edition.status,
        created_by=edition.created_by,
        last_modified=edition.last_modified,
        page_count=len(edition.pages),
        actions=sorted(available_actions(edition, user)),
    )


@router.get("", response_model=list[EditionSummary])
def list_editions(
    search: str | None = None,
    status: str | None = Query(default=None, description="Edition status or 'All'"),
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    if status in (None, "", "All"):
        wanted = None
    elif status in EDITION_STATUSES:
        wanted = status
    else:
        raise HTTPException(status_code=400, detail=f"Unknown status '{status}'")

    editions = ctx.edition_repo.list_editions(search=search, status=wanted)
    return [to_summary(e, user) for e in editions]


@router.post("", response_model=Edition)
def create_edition(
    request: CreateEditionRequest,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        return ctx.editor.create_edition(request.title)


@router.get("/overdue", response_model=list[Edition])
def overdue_editions(
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    """Scheduled editions whose date has passed and still need a publish action."""
    return ctx.publish_service.overdue()


@router.get("/{edition_id}", response_model=Edition)
def get_edition(
    edition_id: str,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    edition = ctx.edition_repo.get_by_id(edition_id)
    if edition is None:
        raise HTTPException(status_code=404, detail="Edition not found.")
    return edition


@router.post("/{edition_id}/open", response_model=WorkspaceState)
def open_edition(
    edition_id: str,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    with domain_errors():
        ctx.editor.load_edition(edition_id)
    return WorkspaceState(
        user=user, edition=ctx.editor.current_edition, page=ctx.editor.current_page
    )


@router.post("/{edition_id}/publish", response_model=PublishResponse)
def publish_edition(
    edition_id: str,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    return publish_response(ctx.editor.publish_edition(edition_id))


@router.post("/{edition_id}/approve", response_model=PublishResponse)
def approve_edition(
    edition_id: str,
    ctx: ServiceContext = Depends(get_context),
    user: User = Depends(get_current_user),
) -> Any:
    return publish_response(ctx.editor.approve_edition(edition_id))
