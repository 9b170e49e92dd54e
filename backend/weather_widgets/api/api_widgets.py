from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from .dependencies import get_db
from ..crud import crud_widget
from ..models.widget import LOCATION_MAX_LENGTH
from ..schemas.widget import WidgetCreate, WidgetResponse
from ..services.location import normalize_location
from ..utils.errors import error_response

router = APIRouter(tags=["widgets"])
logger = logging.getLogger(__name__)


# Largest value an INTEGER primary key can hold
MAX_WIDGET_ID = 2**63 - 1


def _parse_widget_id(raw: str) -> Optional[int]:
    if not (raw.isascii() and raw.isdigit()):
        return None
    parsed = int(raw)
    if parsed > MAX_WIDGET_ID:
        return None
    return parsed


@router.get("", response_model=list[WidgetResponse])
def list_widgets(db: Session = Depends(get_db)):
    """Return every widget, most recently created first."""
    return crud_widget.get_widgets(db)


@router.post("", response_model=WidgetResponse, status_code=status.HTTP_201_CREATED)
def create_widget(widget_in: Optional[WidgetCreate] = None, db: Session = Depends(get_db)):
    location = widget_in.location if widget_in is not None else None
    if not location or not isinstance(location, str) or not location.strip():
        return error_response(
            "Location is required and must be a non-empty string",
            status.HTTP_400_BAD_REQUEST,
        )

    normalized = normalize_location(location)
    if not normalized:
        return error_response("Invalid location name", status.HTTP_400_BAD_REQUEST)
    if len(normalized) > LOCATION_MAX_LENGTH:
        return error_response(
            f"Location cannot exceed {LOCATION_MAX_LENGTH} characters",
            status.HTTP_400_BAD_REQUEST,
        )

    if crud_widget.get_widget_by_location(db, normalized) is not None:
        return error_response("Widget already exists", status.HTTP_409_CONFLICT)

    try:
        widget = crud_widget.create_widget(db, normalized)
    except IntegrityError:
        # Lost a race with a concurrent insert of the same city
        return error_response("Widget already exists", status.HTTP_409_CONFLICT)
    logger.info("Created widget %s for %s", widget.id, widget.location)
    return widget


@router.get("/{widget_id}", response_model=WidgetResponse)
def read_widget(widget_id: str, db: Session = Depends(get_db)):
    parsed = _parse_widget_id(widget_id)
    if parsed is None:
        return error_response("Invalid widget ID format", status.HTTP_400_BAD_REQUEST)
    widget = crud_widget.get_widget(db, parsed)
    if widget is None:
        return error_response("Widget not found", status.HTTP_404_NOT_FOUND)
    return widget


@router.delete("/{widget_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_widget(widget_id: str, db: Session = Depends(get_db)):
    parsed = _parse_widget_id(widget_id)
    if parsed is None:
        return error_response("Invalid widget ID format", status.HTTP_400_BAD_REQUEST)
    if crud_widget.delete_widget(db, parsed) is None:
        return error_response("Widget not found", status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
