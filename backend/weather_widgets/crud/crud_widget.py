from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.widget import Widget


def get_widgets(db: Session) -> list[Widget]:
    """Return all widgets, newest first."""
    return (
        db.query(Widget)
        .order_by(Widget.created_at.desc(), Widget.id.desc())
        .all()
    )


def get_widget(db: Session, widget_id: int) -> Widget | None:
    return db.query(Widget).filter(Widget.id == widget_id).first()


def get_widget_by_location(db: Session, location: str) -> Widget | None:
    """Case-insensitive lookup on the stored location."""
    return (
        db.query(Widget)
        .filter(func.lower(Widget.location) == location.lower())
        .first()
    )


def create_widget(db: Session, location: str) -> Widget:
    """Insert a widget for an already-normalized location.

    Lets IntegrityError propagate when the location is taken.
    """
    db_widget = Widget(location=location)
    db.add(db_widget)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_widget)
    return db_widget


def delete_widget(db: Session, widget_id: int) -> Widget | None:
    db_widget = get_widget(db, widget_id)
    if db_widget:
        db.delete(db_widget)
        db.commit()
    return db_widget
