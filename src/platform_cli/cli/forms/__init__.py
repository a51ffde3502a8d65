"""Form engine used to validate user input before remote mutations."""

from .exceptions import FormError, InvalidValueError, MissingValueError
from .fields import ArrayField, BooleanField, Field, OptionsField, UrlField
from .form import Form

__all__ = [
    "Form",
    "Field",
    "BooleanField",
    "OptionsField",
    "ArrayField",
    "UrlField",
    "FormError",
    "InvalidValueError",
    "MissingValueError",
]
