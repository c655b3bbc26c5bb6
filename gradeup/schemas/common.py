"""Common schema module."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from gradeup.utils.validators import sanitize_optional, sanitize_text

CleanStr = Annotated[str, BeforeValidator(sanitize_text)]
OptionalCleanStr = Annotated[str | None, BeforeValidator(sanitize_optional)]

# Request containers FastAPI prefixes onto error locations.
_LOCATION_ROOTS = {"body", "query", "path", "header"}


class PageInfo(BaseModel):
    page: int = Field(ge=1)
    page_size: int = Field(ge=1, le=100)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "PageInfo":
        return cls(page=page, page_size=page_size, total=total, total_pages=math.ceil(total / page_size))


def _field_path(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_ROOTS:
        parts = parts[1:]
    return ".".join(parts) or "_root"


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Collapse pydantic error entries into a field path -> messages map."""
    fields: dict[str, list[str]] = {}
    for error in errors:
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        fields.setdefault(_field_path(error.get("loc", ())), []).append(message)
    return fields
