from .widget import Widget, LOCATION_MAX_LENGTH
