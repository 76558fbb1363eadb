"""Workflow document metadata, schemas, schedules and flow directives."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from flowspec.durations import Duration
from flowspec.validation import (
    DecodeError,
    ValidationError,
    is_hostname_valid,
    is_semantic_version_valid,
)

DEFAULT_SCHEMA = "json"

_ABSOLUTE_URI = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*://\S+")


def _object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be an object")
    return data


def _str(data: dict[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{what}.{key} must be a string")
    return value


def _map(data: dict[str, Any], key: str, what: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DecodeError(f"{what}.{key} must be an object")
    return dict(value)


@dataclass
class Document:
    """Metadata that identifies a workflow."""

    dsl: str = ""
    namespace: str = ""
    name: str = ""
    version: str = ""
    title: str = ""
    summary: str = ""
    tags: dict[str, str] | None = None
    metadata: dict[str, Any] | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "dsl": self.dsl,
            "namespace": self.namespace,
            "name": self.name,
            "version": self.version,
        }
        for key, value in (
            ("title", self.title),
            ("summary", self.summary),
            ("tags", self.tags),
            ("metadata", self.metadata),
        ):
            if value:
                out[key] = value
        return out

    @classmethod
    def from_json(cls, data: Any) -> Document:
        obj = _object(data, "Document")
        tags = _map(obj, "tags", "Document")
        if tags is not None and not all(isinstance(v, str) for v in tags.values()):
            raise DecodeError("Document.tags must map names to strings")
        return cls(
            dsl=_str(obj, "dsl", "Document"),
            namespace=_str(obj, "namespace", "Document"),
            name=_str(obj, "name", "Document"),
            version=_str(obj, "version", "Document"),
            title=_str(obj, "title", "Document"),
            summary=_str(obj, "summary", "Document"),
            tags=tags,
            metadata=_map(obj, "metadata", "Document"),
        )

    def validate(self) -> None:
        checks = (
            ("DSL", self.dsl, is_semantic_version_valid, "semver_pattern"),
            ("Namespace", self.namespace, is_hostname_valid, "hostname_rfc1123"),
            ("Name", self.name, is_hostname_valid, "hostname_rfc1123"),
            ("Version", self.version, is_semantic_version_valid, "semver_pattern"),
        )
        for field_name, value, check, tag in checks:
            if not value:
                raise ValidationError(f"Document.{field_name}", "required")
            if not check(value):
                raise ValidationError(f"Document.{field_name}", tag)


@dataclass
class Schema:
    """A schema given inline as a document or as an external resource."""

    format: str = ""
    document: str | dict[str, Any] | None = None
    resource: dict[str, Any] | None = None

    def apply_defaults(self) -> None:
        if not self.format:
            self.format = DEFAULT_SCHEMA

    def to_json(self) -> dict[str, Any]:
        self.apply_defaults()
        if self.document is not None:
            return {"format": self.format, "document": self.document}
        if self.resource is not None:
            return {"format": self.format, "resource": self.resource}
        raise ValueError("invalid Schema: no valid field to marshal")

    @classmethod
    def from_json(cls, data: Any) -> Schema:
        obj = _object(data, "Schema")
        schema = cls()
        schema.apply_defaults()
        if "document" in obj:
            document = obj["document"]
            if not isinstance(document, (str, dict)):
                raise DecodeError(
                    "invalid Schema: 'document' must be a string or an object"
                )
            schema.document = document
        if "resource" in obj:
            resource = obj["resource"]
            if resource is None:
                resource = {}
            if not isinstance(resource, dict):
                raise DecodeError("invalid Schema: failed to parse 'resource'")
            name = resource.get("name")
            if name is not None and not isinstance(name, str):
                raise DecodeError("invalid Schema: failed to parse 'resource'")
            schema.resource = dict(resource)
        if (schema.document is None) == (schema.resource is None):
            raise DecodeError(
                "invalid Schema: must specify either 'document' or 'resource', but not both"
            )
        return schema

    def validate(self) -> None:
        """Check the external resource, when one is given."""
        if self.resource is None:
            return
        endpoint = self.resource.get("endpoint")
        if endpoint is None:
            raise ValidationError("Schema.Resource.Endpoint", "required")
        uri = endpoint.get("uri") if isinstance(endpoint, dict) else endpoint
        if not isinstance(uri, str) or not _ABSOLUTE_URI.fullmatch(uri):
            raise ValidationError("Schema.Resource.Endpoint.URITemplate", "uri_pattern")


@dataclass
class Schedule:
    """When a workflow is started."""

    every: Duration | None = None
    cron: str = ""
    after: Duration | None = None
    on: dict[str, Any] | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.every is not None:
            out["every"] = self.every.to_json()
        if self.cron:
            out["cron"] = self.cron
        if self.after is not None:
            out["after"] = self.after.to_json()
        if self.on is not None:
            out["on"] = self.on
        return out

    @classmethod
    def from_json(cls, data: Any) -> Schedule:
        obj = _object(data, "Schedule")
        every = obj.get("every")
        after = obj.get("after")
        return cls(
            every=None if every is None else Duration.from_json(every),
            cron=_str(obj, "cron", "Schedule"),
            after=None if after is None else Duration.from_json(after),
            on=_map(obj, "on", "Schedule"),
        )


class FlowDirectiveType(str, Enum):
    """The enumerated flow directives."""

    CONTINUE = "continue"
    EXIT = "exit"
    END = "end"


_ENUM_DIRECTIVES = frozenset(item.value for item in FlowDirectiveType)


@dataclass
class FlowDirective:
    """What to do next: an enumerated directive or the name of a task."""

    value: str = ""

    def is_enum(self) -> bool:
        return self.value in _ENUM_DIRECTIVES

    def to_json(self) -> str:
        return self.value

    @classmethod
    def from_json(cls, data: Any) -> FlowDirective:
        if not isinstance(data, str):
            raise DecodeError("FlowDirective must be a string")
        return cls(data)

    def validate(self) -> None:
        if not self.value:
            raise ValidationError("FlowDirective.Value", "required")