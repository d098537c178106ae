"""Effective-property and media-type resolution for SwaggerDiff."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from .models import (
    ModelKind,
    Operation,
    SchemaDefinition,
    SchemaProperty,
    Specification,
)
from .exceptions import CircularRefError, SchemaParseError

logger = logging.getLogger(__name__)


class SchemaResolver(ABC):
    """
    Tells the validator what a definition or operation effectively declares.

    A model may inherit its properties by reference, and an operation may
    inherit its media types from the document; the validator only ever asks
    this interface and never looks those things up itself.
    """

    @abstractmethod
    def resolve_properties_from_actual(self, definition: SchemaDefinition) -> dict[str, SchemaProperty]:
        ...

    @abstractmethod
    def resolve_properties_from_expected(self, definition: SchemaDefinition) -> dict[str, SchemaProperty]:
        ...

    @abstractmethod
    def get_actual_consumes(self, operation: Operation) -> list[str]:
        ...

    @abstractmethod
    def get_expected_consumes(self, operation: Operation) -> list[str]:
        ...

    @abstractmethod
    def get_actual_produces(self, operation: Operation) -> list[str]:
        ...

    @abstractmethod
    def get_expected_produces(self, operation: Operation) -> list[str]:
        ...


class DefinitionResolver:
    """Resolves the effective properties of definitions within one document."""

    def __init__(self, definitions: Optional[dict[str, SchemaDefinition]]):
        self.definitions = definitions or {}
        self._resolution_stack: list[str] = []

    def resolve(self, definition: Optional[SchemaDefinition]) -> dict[str, SchemaProperty]:
        """
        Collect the properties a definition declares or inherits.

        Returns:
            Mapping of property name to property, in declaration order
        """
        if definition is None:
            return {}

        if definition.kind == ModelKind.REF:
            return self._resolve_ref(definition.ref)

        if definition.kind == ModelKind.COMPOSED:
            resolved: dict[str, SchemaProperty] = {}
            for part in definition.all_of:
                resolved.update(self.resolve(part))
            # Properties declared beside allOf sit on top of the inherited ones.
            resolved.update(definition.properties)
            return resolved

        if definition.kind == ModelKind.ARRAY:
            return {}

        return dict(definition.properties)

    def _resolve_ref(self, ref: Optional[str]) -> dict[str, SchemaProperty]:
        logger.debug("Resolving definition reference %s", ref)
        if ref in self._resolution_stack:
            raise CircularRefError(self._resolution_stack + [ref])

        target = self.definitions.get(ref)
        if target is None:
            raise SchemaParseError(
                f"Cannot resolve definition reference: {ref}",
                location=f"#/definitions/{ref}",
                reason="Definition not found"
            )

        self._resolution_stack.append(ref)
        try:
            return self.resolve(target)
        finally:
            self._resolution_stack.pop()


class DocumentSchemaResolver(SchemaResolver):
    """
    Default resolver backed by the two specifications being compared.

    Properties follow ``$ref`` and ``allOf`` inside the owning document.
    Media types fall back to the document-level ``consumes``/``produces``
    when an operation declares none.
    """

    def __init__(self, actual: Specification, expected: Specification):
        self.actual = actual
        self.expected = expected
        self._actual_definitions = DefinitionResolver(actual.definitions)
        self._expected_definitions = DefinitionResolver(expected.definitions)

    def resolve_properties_from_actual(self, definition: SchemaDefinition) -> dict[str, SchemaProperty]:
        return self._actual_definitions.resolve(definition)

    def resolve_properties_from_expected(self, definition: SchemaDefinition) -> dict[str, SchemaProperty]:
        return self._expected_definitions.resolve(definition)

    def get_actual_consumes(self, operation: Operation) -> list[str]:
        return _with_fallback(operation.consumes, self.actual.consumes)

    def get_expected_consumes(self, operation: Operation) -> list[str]:
        return _with_fallback(operation.consumes, self.expected.consumes)

    def get_actual_produces(self, operation: Operation) -> list[str]:
        return _with_fallback(operation.produces, self.actual.produces)

    def get_expected_produces(self, operation: Operation) -> list[str]:
        return _with_fallback(operation.produces, self.expected.produces)


def _with_fallback(local: Optional[list[str]], global_: Optional[list[str]]) -> list[str]:
    if local:
        return list(local)
    return list(global_ or [])
