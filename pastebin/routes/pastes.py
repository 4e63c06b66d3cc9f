"""
Paste routes.
Handles create, fetch, list and delete operations.
"""
import logging
import secrets
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pastebin.exceptions import TransientStorageError
from pastebin.models import MAX_CONTENT_LENGTH, DeleteResult, Paste, PasteCreate, PasteCreated
from pastebin.storage import PasteStorage, get_storage, now_ms

router = APIRouter()
logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]


def generate_paste_id() -> str:
    """10-11 URL-safe characters, all within the sanitized identifier set."""
    return secrets.token_urlsafe(8)


def get_id_generator() -> IdGenerator:
    return generate_paste_id


def _require_id(paste_id: Optional[str]) -> str:
    if not paste_id:
        raise HTTPException(status_code=400, detail="id is required")
    return paste_id


@router.post("/api/paste", response_model=PasteCreated, status_code=201)
async def create_paste(
    paste: PasteCreate,
    storage: PasteStorage = Depends(get_storage),
    new_id: IdGenerator = Depends(get_id_generator),
) -> PasteCreated:
    """
    Create a new paste.

    Args:
        paste: Paste data (content, optional title, language and expiry)
        storage: Active storage backend
        new_id: Paste id generator

    Returns:
        The new paste ID

    Raises:
        HTTPException: 400 if content is missing or too large, 500 if storage fails
    """
    if not paste.has_content():
        raise HTTPException(status_code=400, detail="Content is required")

    if len(paste.content) > MAX_CONTENT_LENGTH:
        raise HTTPException(status_code=400, detail="Content too large (max 500KB)")

    record = paste.to_paste(new_id(), now_ms())
    try:
        await storage.save_paste(record)
    except TransientStorageError as e:
        logger.error(f"POST /api/paste error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return PasteCreated(id=record.id)


@router.get("/api/paste", response_model=Paste)
async def fetch_paste(
    paste_id: Optional[str] = Query(None, alias="id"),
    storage: PasteStorage = Depends(get_storage),
) -> Paste:
    """
    Fetch a paste by id.

    Raises:
        HTTPException: 400 without an id, 404 if not found or expired
    """
    paste_id = _require_id(paste_id)
    try:
        paste = await storage.get_paste(paste_id)
    except TransientStorageError as e:
        logger.error(f"GET /api/paste error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    if paste is None:
        raise HTTPException(status_code=404, detail="Paste not found or expired")
    return paste


@router.get("/api/pastes", response_model=List[Paste])
async def list_pastes(storage: PasteStorage = Depends(get_storage)) -> List[Paste]:
    """All live pastes, newest first. Empty when Redis is the backend."""
    return await storage.list_pastes()


@router.delete("/api/paste", response_model=DeleteResult)
async def delete_paste(
    paste_id: Optional[str] = Query(None, alias="id"),
    storage: PasteStorage = Depends(get_storage),
) -> DeleteResult:
    paste_id = _require_id(paste_id)
    try:
        deleted = await storage.delete_paste(paste_id)
    except TransientStorageError as e:
        logger.error(f"DELETE /api/paste error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    return DeleteResult(deleted=deleted)
