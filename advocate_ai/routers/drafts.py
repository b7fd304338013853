from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from ..auth import get_current_user
from ..dependencies import get_draft_store
from ..exceptions import ValidationError
from ..models.schemas import DraftResponse, DraftSavedResponse, DraftUpdate, MessageResponse
from ..services.stores import DraftStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drafts", tags=["Drafts"])

# DraftUpdate field -> Draft column
_UPDATABLE_FIELDS = {
    "title": "title",
    "content": "content",
    "draft_type": "draft_type",
    "case_reference": "case_id",
    "client_reference": "client_id",
    "status": "status",
    "tags": "tags",
}

def _get_owned_draft(store: DraftStore, draft_id: int, owner_id: int):
    draft = store.get_for_owner(draft_id, owner_id)
    if not draft:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Draft not found."
        )
    return draft

@router.get("", response_model=List[DraftResponse])
async def list_drafts(
    current_user = Depends(get_current_user),
    store: DraftStore = Depends(get_draft_store)
):
    """List the current user's drafts, most recently updated first."""
    return [DraftResponse.from_draft(d) for d in store.list_for_owner(current_user.id)]

@router.get("/{draft_id}", response_model=DraftResponse)
async def get_draft(
    draft_id: int,
    current_user = Depends(get_current_user),
    store: DraftStore = Depends(get_draft_store)
):
    """Get a single draft by ID."""
    return DraftResponse.from_draft(_get_owned_draft(store, draft_id, current_user.id))

@router.put("/{draft_id}", response_model=DraftSavedResponse)
async def update_draft(
    draft_id: int,
    update: DraftUpdate,
    current_user = Depends(get_current_user),
    store: DraftStore = Depends(get_draft_store)
):
    """Update a draft's metadata and content.

    Only fields present in the request change; sending ``null`` for a case or
    client reference unlinks it. The source prompt is never editable.
    """
    draft = _get_owned_draft(store, draft_id, current_user.id)

    changes = {}
    for field_name in update.model_fields_set:
        column = _UPDATABLE_FIELDS[field_name]
        value = getattr(update, field_name)
        if value is None and column in ("title", "content", "status"):
            raise ValidationError(f"Field '{field_name}' cannot be cleared")
        changes[column] = [] if column == "tags" and value is None else value

    draft = store.update(draft, changes)
    logger.info(f"Draft {draft_id} updated by user {current_user.id}: {sorted(changes)}")
    return {
        "message": "Draft updated successfully",
        "draft": DraftResponse.from_draft(draft)
    }

@router.delete("/{draft_id}", response_model=MessageResponse)
async def delete_draft(
    draft_id: int,
    current_user = Depends(get_current_user),
    store: DraftStore = Depends(get_draft_store)
):
    """Delete a draft."""
    draft = _get_owned_draft(store, draft_id, current_user.id)
    store.delete(draft)
    logger.info(f"Draft {draft_id} deleted by user {current_user.id}")
    return {"message": "Draft deleted successfully."}
