from datetime import datetime, timezone

from flask import current_app, request
from werkzeug.routing import IntegerConverter

from lending.errors import InvalidInput

# largest value an INTEGER/BIGINT id column can hold
MAX_ID = 2 ** 63 - 1


class IdConverter(IntegerConverter):
    """``<int:...>`` that stops matching above MAX_ID, so oversized ids are a plain 404."""

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("max", MAX_ID)
        super().__init__(map, *args, **kwargs)


def optional_int(data: dict, key: str):
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidInput(f"{key} must be an integer")
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{key} must be an integer") from None
    if abs(value) > MAX_ID:
        raise InvalidInput(f"{key} is out of range")
    return value


def required_int(data: dict, key: str) -> int:
    value = optional_int(data, key)
    if value is None:
        raise InvalidInput(f"{key} is required")
    return value


def optional_datetime(data: dict, key: str):
    """ISO 8601 string -> naive UTC datetime."""
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise InvalidInput(f"{key} must be an ISO 8601 date") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def page_args():
    page = optional_int(request.args, "page") or 1
    limit = optional_int(request.args, "limit") or current_app.config["PAGE_SIZE"]
    if page < 1 or limit < 1:
        raise InvalidInput("page and limit must be >= 1")
    limit = min(limit, 100)
    if (page - 1) * limit > MAX_ID:
        raise InvalidInput("page is out of range")
    return page, limit
