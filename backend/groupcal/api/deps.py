"""
Request dependencies shared by the API routers.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from groupcal.backends import build_registry
from groupcal.config import settings
from groupcal.database import get_db
from groupcal.services.calendar import CalendarManager
from groupcal.stores.calendar import CalendarStore

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
ACCEPTABLE_MEDIA_TYPES = {JSON_MEDIA_TYPE, "application/*", "*/*"}


def get_current_user_id(x_user_id: Optional[str] = Header(None, alias="x-user-id")) -> str:
    """Identity of the caller, as forwarded by the authenticating proxy."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing required header: x-user-id",
        )
    return x_user_id


def get_calendar_manager(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> CalendarManager:
    """Dependency to get a calendar business layer for the current request."""
    store = CalendarStore(db)
    return CalendarManager(store, build_registry(settings, store), user_id)


def accept_media_type(accept: Optional[str]) -> Optional[str]:
    """First media type of an Accept header, without its parameters."""
    if accept is None:
        return None
    accept = accept.split(",", 1)[0]
    accept = accept.split(";", 1)[0]
    return accept.strip().lower()


def content_media_type(content_type: Optional[str]) -> Optional[str]:
    """Media type of a Content-Type header, without its parameters."""
    if content_type is None:
        return None
    return content_type.split(";", 1)[0].strip().lower()


def require_json_response(accept: Optional[str] = Header(None)) -> None:
    media_type = accept_media_type(accept)
    if media_type and media_type not in ACCEPTABLE_MEDIA_TYPES:
        raise HTTPException(
            status_code=status.HTTP_406_NOT_ACCEPTABLE,
            detail=f"Cannot respond with {media_type}",
        )


def require_json_body(content_type: Optional[str] = Header(None)) -> None:
    media_type = content_media_type(content_type)
    if media_type is not None and media_type != JSON_MEDIA_TYPE:
        logger.debug(f"Rejected request body of type {media_type}")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported content type {media_type}",
        )
