"""Field validators and the errors raised while decoding or validating."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_ISO8601_DURATION = re.compile(
    r"P(\d+Y)?(\d+M)?(\d+D)?(T(\d+H)?(\d+M)?(\d+S)?)?",
    re.ASCII,
)
_SEMANTIC_VERSION = re.compile(
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?",
    re.ASCII,
)
_HOSTNAME_RFC1123 = re.compile(
    r"(([a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)*[a-zA-Z]{2,63}"
    r"|[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)",
    re.ASCII,
)


class DecodeError(ValueError):
    """Raised when JSON data cannot be decoded into a model object."""


class ValidationError(ValueError):
    """Raised when a model object breaks one of its constraints."""

    def __init__(self, namespace: str, tag: str, param: str = "") -> None:
        self.namespace = namespace
        self.field = namespace.rsplit(".", 1)[-1]
        self.tag = tag
        self.param = param
        super().__init__(
            f"Key: '{namespace}' Error:Field validation for "
            f"'{self.field}' failed on the '{tag}' tag"
        )


def is_iso8601_duration_valid(value: Any) -> bool:
    """Return True if value is an ISO 8601 duration such as ``P1DT12H``."""
    if not isinstance(value, str) or not _ISO8601_DURATION.fullmatch(value):
        return False
    return value[1:] not in ("", "T")


def is_semantic_version_valid(value: Any) -> bool:
    """Return True if value is a semantic version string."""
    return isinstance(value, str) and bool(_SEMANTIC_VERSION.fullmatch(value))


def is_hostname_valid(value: Any) -> bool:
    """Return True if value is an RFC 1123 host name."""
    return isinstance(value, str) and bool(_HOSTNAME_RFC1123.fullmatch(value))


def validate_object_or_string(value: Any) -> bool:
    """Return True for a non-empty string or a non-empty mapping."""
    if isinstance(value, str):
        return value != ""
    if isinstance(value, Mapping):
        return len(value) > 0
    return False


def validate_switch_item(item: Any) -> bool:
    """Return True if a switch item maps exactly one case name to its case."""
    return isinstance(item, Mapping) and len(item) == 1