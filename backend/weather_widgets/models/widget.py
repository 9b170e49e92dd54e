from sqlalchemy import Column, Index, Integer, String, func
from .base import BaseModel

LOCATION_MAX_LENGTH = 100


class Widget(BaseModel):
    """A saved dashboard location.

    ``location`` holds the normalized (title-cased) city name; the unique
    index on its lower-cased form rejects the same city in another casing.
    """

    __tablename__ = "widgets"

    id = Column(Integer, primary_key=True, index=True)
    location = Column(String(LOCATION_MAX_LENGTH), nullable=False)

    __table_args__ = (
        Index("uq_widgets_location_lower", func.lower(location), unique=True),
    )
