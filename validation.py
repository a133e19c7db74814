"""Input checks shared by the catalog, the order workflow and the HTTP handlers."""
from typing import Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId


class InvalidInput(ValueError):
    """Client supplied a value the server cannot use. Rendered as HTTP 400."""


def parse_object_id(value, field: str = "id") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise InvalidInput(f"Invalid {field}: {value!r}")


def parse_object_ids(values: Optional[Iterable], field: str) -> List[ObjectId]:
    if not values:
        return []
    # accept "a,b" as well as repeated query parameters
    ids = []
    for raw in values:
        for part in str(raw).split(","):
            part = part.strip()
            if part:
                ids.append(parse_object_id(part, field))
    return ids


def parse_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def require_positive_int(value, field: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{field} must be an integer")
    if number < 1:
        raise InvalidInput(f"{field} must be at least 1")
    return number
