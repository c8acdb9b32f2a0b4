"""
Calendar endpoints for calendar management.
"""
from typing import List, Optional, Union

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from groupcal.api.deps import get_calendar_manager, require_json_body, require_json_response
from groupcal.exceptions import BusinessLayerError
from groupcal.schemas.calendar import (
    CalendarCount,
    CalendarCreate,
    CalendarResponse,
    CalendarUpdate,
)
from groupcal.services.calendar import CalendarManager

router = APIRouter(dependencies=[Depends(require_json_response)])


def _http_error(ex: BusinessLayerError) -> HTTPException:
    return HTTPException(
        status_code=ex.status_code or status.HTTP_400_BAD_REQUEST,
        detail=ex.message,
    )


@router.get("", response_model=List[CalendarResponse])
def list_calendars(
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    include_disabled: bool = Query(False, description="Include calendars on disabled backends"),
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """List the caller's calendars."""
    try:
        return manager.find_all(
            manager.user_id, limit, offset, active_backends_only=not include_disabled
        )
    except BusinessLayerError as e:
        raise _http_error(e)


@router.get("/count", response_model=CalendarCount)
def count_calendars(
    include_disabled: bool = False,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Number of the caller's calendars."""
    try:
        count = manager.count(manager.user_id, active_backends_only=not include_disabled)
        return CalendarCount(count=count)
    except BusinessLayerError as e:
        raise _http_error(e)


@router.get("/backends/{backend}", response_model=List[CalendarResponse])
def list_calendars_on_backend(
    backend: str,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """List the caller's calendars stored on one backend."""
    try:
        return manager.find_all_on_backend(backend, manager.user_id, limit, offset)
    except BusinessLayerError as e:
        raise _http_error(e)


@router.post(
    "",
    response_model=Union[List[CalendarResponse], CalendarResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_json_body)],
)
def create_calendars(
    calendar_data: Union[List[CalendarCreate], CalendarCreate] = Body(...),
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """
    Create a calendar, or several when the body is an array.

    For an array, calendars that cannot be created are skipped and only the
    created ones are returned.
    """
    if isinstance(calendar_data, list):
        return manager.create_collection_from_request(
            [item.to_calendar() for item in calendar_data]
        )

    try:
        return manager.create_from_request(calendar_data.to_calendar())
    except BusinessLayerError as e:
        raise _http_error(e)


@router.get("/id/{calendar_id}", response_model=CalendarResponse)
def get_calendar_by_id(
    calendar_id: int,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Get a calendar by its id."""
    try:
        return manager.find_by_id(calendar_id, manager.user_id)
    except BusinessLayerError as e:
        raise _http_error(e)


@router.put(
    "/id/{calendar_id}",
    response_model=CalendarResponse,
    dependencies=[Depends(require_json_body)],
)
def update_calendar_by_id(
    calendar_id: int,
    calendar_data: CalendarUpdate,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Replace a calendar addressed by its id."""
    try:
        return manager.update_from_request_by_id(
            calendar_data.to_calendar(), calendar_id, manager.user_id
        )
    except BusinessLayerError as e:
        raise _http_error(e)


@router.patch(
    "/id/{calendar_id}",
    response_model=CalendarResponse,
    dependencies=[Depends(require_json_body)],
)
def patch_calendar_by_id(
    calendar_id: int,
    calendar_data: CalendarUpdate,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Change some fields of a calendar addressed by its id."""
    try:
        return manager.patch_from_request_by_id(
            calendar_data.to_calendar(), calendar_id, manager.user_id
        )
    except BusinessLayerError as e:
        raise _http_error(e)


@router.get("/{public_uri}", response_model=CalendarResponse)
def get_calendar(
    public_uri: str,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Get a specific calendar."""
    try:
        return manager.find(public_uri, manager.user_id)
    except BusinessLayerError as e:
        raise _http_error(e)


@router.put(
    "/{public_uri}",
    response_model=CalendarResponse,
    dependencies=[Depends(require_json_body)],
)
def update_calendar(
    public_uri: str,
    calendar_data: CalendarUpdate,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Replace a calendar."""
    try:
        return manager.update_from_request(
            calendar_data.to_calendar(), public_uri, manager.user_id
        )
    except BusinessLayerError as e:
        raise _http_error(e)


@router.patch(
    "/{public_uri}",
    response_model=CalendarResponse,
    dependencies=[Depends(require_json_body)],
)
def patch_calendar(
    public_uri: str,
    calendar_data: CalendarUpdate,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Change some fields of a calendar."""
    try:
        return manager.patch_from_request(
            calendar_data.to_calendar(), public_uri, manager.user_id
        )
    except BusinessLayerError as e:
        raise _http_error(e)


@router.post("/{public_uri}/touch", response_model=CalendarResponse)
def touch_calendar(
    public_uri: str,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Bump a calendar's ctag."""
    try:
        return manager.touch(public_uri, manager.user_id)
    except BusinessLayerError as e:
        raise _http_error(e)


@router.delete("/{public_uri}", status_code=status.HTTP_204_NO_CONTENT)
def delete_calendar(
    public_uri: str,
    manager: CalendarManager = Depends(get_calendar_manager),
):
    """Delete a calendar."""
    try:
        calendar = manager.find(public_uri, manager.user_id)
        manager.delete(calendar)
    except BusinessLayerError as e:
        raise _http_error(e)
