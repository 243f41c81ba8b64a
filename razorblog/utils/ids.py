# razorblog/utils/ids.py
import uuid
from marshmallow import ValidationError


def new_id() -> str:
    """Document ids are uuid4 strings."""
    return str(uuid.uuid4())


def is_valid_id(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        return str(uuid.UUID(value)) == value.lower()
    except ValueError:
        return False


def require_valid_id(value, field_name: str = "id") -> str:
    """Raises a marshmallow ValidationError (rendered as 400) for malformed ids."""
    if not is_valid_id(value):
        raise ValidationError({field_name: [f"'{value}' is not a valid id."]})
    return value.lower()


def validate_id_field(value) -> None:
    """marshmallow field validator for id-valued payload fields."""
    if not is_valid_id(value):
        raise ValidationError("Not a valid id.")
