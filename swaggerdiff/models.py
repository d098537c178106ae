"""Data models for SwaggerDiff."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ValidationError


class AssertionType(Enum):
    VERSION = "version"
    INFO = "info"
    PATHS = "paths"
    DEFINITIONS = "definitions"
    MODELS = "models"
    PROPERTIES = "properties"
    REF_PROPERTIES = "ref_properties"
    ARRAY_PROPERTIES = "array_properties"
    STRING_PROPERTIES = "string_properties"

    @classmethod
    def parse(cls, name: str) -> 'AssertionType':
        """
        Look up a category by name.

        Accepts ``PATHS``, ``paths``, ``refProperties`` and the
        ``validateRefProperties`` spelling used in property-style configs.
        """
        raw = str(name).strip()
        if raw[:8].lower() == "validate" and len(raw) > 8:
            raw = raw[8:]
        if any(c.islower() for c in raw):
            raw = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', '_', raw)
        key = raw.replace('-', '_').upper()
        try:
            return cls[key]
        except KeyError:
            raise ValidationError(
                f"Unknown assertion type: {name}",
                {"known": [t.name for t in cls]}
            )


class HttpMethod(Enum):
    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    PATCH = "patch"


class ParameterKind(Enum):
    BODY = "body"
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    FORM = "formData"
    COOKIE = "cookie"
    REF = "ref"


class ModelKind(Enum):
    OBJECT = "object"
    REF = "ref"
    ARRAY = "array"
    COMPOSED = "composed"


class PropertyKind(Enum):
    REF = "ref"
    ARRAY = "array"
    STRING = "string"
    DATE = "date"
    DATE_TIME = "date-time"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    MAP = "map"
    FILE = "file"
    UNTYPED = "untyped"


class MismatchType(Enum):
    MISSING = "MISSING"
    EXTRA = "EXTRA"
    KEY_SET_MISMATCH = "KEY_SET_MISMATCH"
    NOT_EMPTY = "NOT_EMPTY"
    COUNT_MISMATCH = "COUNT_MISMATCH"
    KIND_MISMATCH = "KIND_MISMATCH"
    VALUE_MISMATCH = "VALUE_MISMATCH"


# ----------------------------
# Specification tree
# ----------------------------


@dataclass
class Info:
    """API metadata block."""
    title: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact: Optional[dict] = None
    license: Optional[dict] = None


@dataclass
class SchemaProperty:
    """A single field of a definition, a response body or a response header."""
    kind: PropertyKind
    enum: Optional[list[str]] = None
    ref: Optional[str] = None
    items: Optional[SchemaProperty] = None
    format: Optional[str] = None
    # inline OBJECT members
    properties: dict[str, SchemaProperty] = field(default_factory=dict)


@dataclass
class SchemaDefinition:
    """
    A named or inline model.

    ``properties`` holds only what the model declares itself; the effective
    set (inherited through ``ref`` or ``all_of``) comes from a SchemaResolver.
    """
    kind: ModelKind
    properties: dict[str, SchemaProperty] = field(default_factory=dict)
    ref: Optional[str] = None
    items: Optional[SchemaProperty] = None
    all_of: list[SchemaDefinition] = field(default_factory=list)


@dataclass
class Parameter:
    """One operation parameter. REF parameters have no name of their own."""
    name: Optional[str]
    kind: ParameterKind
    type: Optional[str] = None
    enum: Optional[list[str]] = None
    schema: Optional[SchemaDefinition] = None
    ref: Optional[str] = None
    required: bool = False


@dataclass
class Response:
    schema: Optional[SchemaProperty] = None
    headers: dict[str, SchemaProperty] = field(default_factory=dict)
    description: Optional[str] = None


@dataclass
class Operation:
    consumes: list[str] = field(default_factory=list)
    produces: list[str] = field(default_factory=list)
    parameters: list[Parameter] = field(default_factory=list)
    responses: dict[str, Response] = field(default_factory=dict)
    operation_id: Optional[str] = None


@dataclass
class PathItem:
    """Operations of one path, keyed by HTTP method. Absent methods have no entry."""
    operations: dict[HttpMethod, Operation] = field(default_factory=dict)

    def get(self, method: HttpMethod) -> Optional[Operation]:
        return self.operations.get(method)

    @property
    def operation_count(self) -> int:
        return sum(1 for op in self.operations.values() if op is not None)


@dataclass
class Specification:
    """Root of an API description tree."""
    info: Info = field(default_factory=Info)
    paths: dict[str, PathItem] = field(default_factory=dict)
    definitions: dict[str, SchemaDefinition] = field(default_factory=dict)
    consumes: list[str] = field(default_factory=list)
    produces: list[str] = field(default_factory=list)
    base_path: Optional[str] = None


# ----------------------------
# Configuration
# ----------------------------


DEFAULT_ENABLED_ASSERTIONS = frozenset(
    t for t in AssertionType
    if t not in (AssertionType.VERSION, AssertionType.INFO)
)


def _as_frozenset(values: Any) -> frozenset:
    if not values:
        return frozenset()
    if isinstance(values, str):
        values = [v for v in (s.strip() for s in values.split(',')) if v]
    return frozenset(values)


@dataclass(frozen=True)
class AssertionConfig:
    """Which checks run, and how the expected side is filtered before comparison."""
    enabled_assertions: frozenset = DEFAULT_ENABLED_ASSERTIONS
    paths_to_ignore_in_expected: frozenset = frozenset()
    definitions_to_ignore_in_expected: frozenset = frozenset()
    # "<definition>.<property>" keys
    properties_to_ignore_in_expected: frozenset = frozenset()
    paths_prepend_expected: Optional[str] = None
    max_depth: int = 100

    def __post_init__(self):
        # Accept plain sets/lists from callers while staying hashable.
        object.__setattr__(self, "enabled_assertions", frozenset(
            t if isinstance(t, AssertionType) else AssertionType.parse(t)
            for t in _as_frozenset(self.enabled_assertions)
        ))
        for name in (
            "paths_to_ignore_in_expected",
            "definitions_to_ignore_in_expected",
            "properties_to_ignore_in_expected",
        ):
            object.__setattr__(self, name, _as_frozenset(getattr(self, name)))

    def is_assertion_enabled(self, assertion_type: AssertionType) -> bool:
        return assertion_type in self.enabled_assertions

    def with_assertions(self, **flags: bool) -> 'AssertionConfig':
        """
        Return a copy with categories switched on or off.

        Example:
            config.with_assertions(version=True, string_properties=False)
        """
        enabled = set(self.enabled_assertions)
        for name, on in flags.items():
            assertion_type = AssertionType.parse(name)
            if on:
                enabled.add(assertion_type)
            else:
                enabled.discard(assertion_type)
        return replace(self, enabled_assertions=frozenset(enabled))

    @classmethod
    def all_enabled(cls, **kwargs) -> 'AssertionConfig':
        return cls(enabled_assertions=frozenset(AssertionType), **kwargs)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'AssertionConfig':
        """
        Build a config from a mapping, typically a parsed YAML file.

        Recognised keys: ``assertions`` (category name -> bool),
        ``pathsToIgnoreInExpected``, ``definitionsToIgnoreInExpected``,
        ``propertiesToIgnoreInExpected``, ``pathsPrependExpected``, ``maxDepth``.
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValidationError(
                "Assertion config must be an object",
                {"type": type(data).__name__}
            )

        enabled = set(DEFAULT_ENABLED_ASSERTIONS)
        for name, on in (data.get('assertions') or {}).items():
            assertion_type = AssertionType.parse(name)
            if on:
                enabled.add(assertion_type)
            else:
                enabled.discard(assertion_type)

        return cls(
            enabled_assertions=frozenset(enabled),
            paths_to_ignore_in_expected=data.get('pathsToIgnoreInExpected'),
            definitions_to_ignore_in_expected=data.get('definitionsToIgnoreInExpected'),
            properties_to_ignore_in_expected=data.get('propertiesToIgnoreInExpected'),
            paths_prepend_expected=data.get('pathsPrependExpected'),
            max_depth=int(data.get('maxDepth', 100)),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> 'AssertionConfig':
        """Load a config from a YAML or JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r') as f:
            content = f.read()

        try:
            return cls.from_dict(yaml.safe_load(content))
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse config file: {e}")


# ----------------------------
# Results
# ----------------------------


@dataclass
class Mismatch:
    """A single structural divergence between actual and expected."""
    context: str
    type: MismatchType
    message: str
    expected: Any = None
    actual: Any = None

    def __str__(self) -> str:
        return f"[{self.context}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "context": self.context,
            "type": self.type.value,
            "message": self.message,
            "expected": _jsonable(self.expected),
            "actual": _jsonable(self.actual),
        }


@dataclass
class ValidationReport:
    """Outcome of one validation run."""
    is_match: bool
    checks_performed: int = 0
    mismatches: list[Mismatch] = field(default_factory=list)

    def count_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for mismatch in self.mismatches:
            counts[mismatch.type.value] = counts.get(mismatch.type.value, 0) + 1
        return counts

    def to_dict(self) -> dict:
        return {
            "is_match": self.is_match,
            "summary": {
                "checks_performed": self.checks_performed,
                "mismatches_found": len(self.mismatches),
                "by_type": self.count_by_type(),
            },
            "mismatches": [m.to_dict() for m in self.mismatches],
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(_jsonable(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value
