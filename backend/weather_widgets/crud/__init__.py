from . import crud_widget
