from __future__ import annotations

import base64
import binascii
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_enum(enum_cls: Type[E], value, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_enum(enum_cls: Type[E], value, field_name: str) -> Optional[E]:
    if value is None or value == "":
        return None
    return require_enum(enum_cls, value, field_name)


def embedded_size(value: Optional[str]) -> int:
    """Decoded byte size of a base64 payload or ``data:`` URL.

    Plain URLs and file names are not embedded content and count as 0.
    """

    if not value:
        return 0
    payload = value
    if value.startswith("data:"):
        _, _, payload = value.partition(",")
    elif "://" in value:
        return 0
    try:
        return len(base64.b64decode(payload, validate=False))
    except (binascii.Error, ValueError):
        return len(payload)


def require_max_bytes(value: Optional[str], field_name: str, max_bytes: int) -> Optional[str]:
    if embedded_size(value) > max_bytes:
        raise ValidationError(f"{field_name} is too large (max {max_bytes // 1024} KB)")
    return value or None
