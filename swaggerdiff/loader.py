"""Builds specification trees from Swagger 2.0 documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from .models import (
    HttpMethod,
    Info,
    ModelKind,
    Operation,
    Parameter,
    ParameterKind,
    PathItem,
    PropertyKind,
    Response,
    SchemaDefinition,
    SchemaProperty,
    Specification,
)
from .exceptions import ExternalRefError, SchemaParseError

logger = logging.getLogger(__name__)

PARAMETER_LOCATIONS = {
    "body": ParameterKind.BODY,
    "path": ParameterKind.PATH,
    "query": ParameterKind.QUERY,
    "header": ParameterKind.HEADER,
    "formData": ParameterKind.FORM,
    "cookie": ParameterKind.COOKIE,
}

PRIMITIVE_PROPERTY_KINDS = {
    "integer": PropertyKind.INTEGER,
    "number": PropertyKind.NUMBER,
    "boolean": PropertyKind.BOOLEAN,
    "file": PropertyKind.FILE,
}

STRING_FORMATS = {
    "date": PropertyKind.DATE,
    "date-time": PropertyKind.DATE_TIME,
}


def load_document(path: str | Path) -> dict:
    """Load a Swagger document from a YAML or JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Swagger document not found: {path}")

    with open(path, 'r') as f:
        content = f.read()

    # YAML also covers JSON, since JSON is valid YAML
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SchemaParseError(
            f"Failed to parse Swagger document: {path}",
            location=str(path),
            reason=str(e)
        )

    if not isinstance(document, dict):
        raise SchemaParseError(
            f"Swagger document must be an object: {path}",
            location=str(path),
            reason=f"Top level is {type(document).__name__}"
        )
    return document


def load_specification(source: dict | str | Path) -> Specification:
    """
    Build a Specification from a Swagger 2.0 document.

    Args:
        source: An already parsed document, or a path to a YAML/JSON file

    Returns:
        The specification tree
    """
    if isinstance(source, dict):
        document = source
    else:
        document = load_document(source)
    return SpecificationLoader(document).load()


def simple_ref(ref: str) -> str:
    """
    Reduce a local reference such as ``#/definitions/Pet`` to ``Pet``.

    Raises:
        ExternalRefError: for anything that does not point into the same document
    """
    if not isinstance(ref, str) or not ref.startswith('#/'):
        raise ExternalRefError(str(ref))
    last = ref[2:].split('/')[-1]
    # JSON pointer escaping
    return last.replace('~1', '/').replace('~0', '~')


class SpecificationLoader:
    """Converts one parsed Swagger 2.0 document into a Specification."""

    def __init__(self, document: dict):
        if not isinstance(document, dict):
            raise SchemaParseError(
                "Swagger document must be an object",
                reason=f"Got {type(document).__name__}"
            )
        self.document = document

    def load(self) -> Specification:
        version = self.document.get('swagger')
        if str(version) != "2.0":
            logger.warning("Expected a Swagger 2.0 document, found swagger=%r", version)

        paths = {}
        for path_name, path_node in (self.document.get('paths') or {}).items():
            if str(path_name).startswith('x-'):
                continue
            paths[path_name] = self._load_path_item(path_name, path_node or {})

        definitions = {}
        for name, node in (self.document.get('definitions') or {}).items():
            definitions[name] = self._load_model(node or {}, f"#/definitions/{name}")

        logger.debug("Loaded %d path(s) and %d definition(s)", len(paths), len(definitions))

        return Specification(
            info=self._load_info(self.document.get('info') or {}),
            paths=paths,
            definitions=definitions,
            consumes=list(self.document.get('consumes') or []),
            produces=list(self.document.get('produces') or []),
            base_path=self.document.get('basePath'),
        )

    def _load_info(self, node: dict) -> Info:
        return Info(
            title=node.get('title'),
            version=_as_text(node.get('version')),
            description=node.get('description'),
            terms_of_service=node.get('termsOfService'),
            contact=node.get('contact'),
            license=node.get('license'),
        )

    def _load_path_item(self, path_name: str, node: dict) -> PathItem:
        operations = {}
        for method in HttpMethod:
            operation_node = node.get(method.value)
            if operation_node is not None:
                location = f"#/paths/{path_name}/{method.value}"
                operations[method] = self._load_operation(operation_node, location)
        return PathItem(operations=operations)

    def _load_operation(self, node: dict, location: str) -> Operation:
        parameters = [
            self._load_parameter(p, f"{location}/parameters/{i}")
            for i, p in enumerate(node.get('parameters') or [])
        ]
        responses = {
            str(code): self._load_response(r or {}, f"{location}/responses/{code}")
            for code, r in (node.get('responses') or {}).items()
            if not str(code).startswith('x-')
        }
        return Operation(
            consumes=list(node.get('consumes') or []),
            produces=list(node.get('produces') or []),
            parameters=parameters,
            responses=responses,
            operation_id=node.get('operationId'),
        )

    def _load_parameter(self, node: dict, location: str) -> Parameter:
        if '$ref' in node:
            return Parameter(name=None, kind=ParameterKind.REF, ref=simple_ref(node['$ref']))

        where = node.get('in')
        kind = PARAMETER_LOCATIONS.get(where)
        if kind is None:
            raise SchemaParseError(
                f"Unsupported parameter location: {where}",
                location=location,
                reason="'in' must be one of " + ", ".join(PARAMETER_LOCATIONS)
            )
        if 'name' not in node:
            raise SchemaParseError(
                "Parameter without a name",
                location=location,
                reason="'name' is required"
            )

        if kind == ParameterKind.BODY:
            return Parameter(
                name=node['name'],
                kind=kind,
                schema=self._load_model(node.get('schema') or {}, f"{location}/schema"),
                required=bool(node.get('required', False)),
            )

        return Parameter(
            name=node['name'],
            kind=kind,
            type=node.get('type'),
            enum=_as_list(node.get('enum')),
            required=bool(node.get('required', kind == ParameterKind.PATH)),
        )

    def _load_response(self, node: dict, location: str) -> Response:
        schema = node.get('schema')
        return Response(
            schema=self._load_property(schema, f"{location}/schema") if schema is not None else None,
            headers={
                name: self._load_property(header or {}, f"{location}/headers/{name}")
                for name, header in (node.get('headers') or {}).items()
            },
            description=node.get('description'),
        )

    def _load_model(self, node: dict, location: str) -> SchemaDefinition:
        if '$ref' in node:
            return SchemaDefinition(kind=ModelKind.REF, ref=simple_ref(node['$ref']))

        properties = self._load_properties(node, location)

        if 'allOf' in node:
            return SchemaDefinition(
                kind=ModelKind.COMPOSED,
                properties=properties,
                all_of=[
                    self._load_model(part or {}, f"{location}/allOf/{i}")
                    for i, part in enumerate(node['allOf'])
                ],
            )

        if node.get('type') == 'array':
            items = node.get('items')
            return SchemaDefinition(
                kind=ModelKind.ARRAY,
                items=self._load_property(items, f"{location}/items") if items is not None else None,
            )

        return SchemaDefinition(kind=ModelKind.OBJECT, properties=properties)

    def _load_properties(self, node: dict, location: str) -> dict[str, SchemaProperty]:
        return {
            name: self._load_property(prop or {}, f"{location}/properties/{name}")
            for name, prop in (node.get('properties') or {}).items()
        }

    def _load_property(self, node: Any, location: str) -> SchemaProperty:
        if not isinstance(node, dict):
            raise SchemaParseError(
                "Schema must be an object",
                location=location,
                reason=f"Got {type(node).__name__}"
            )

        if '$ref' in node:
            return SchemaProperty(kind=PropertyKind.REF, ref=simple_ref(node['$ref']))

        prop_type = node.get('type')
        fmt = node.get('format')

        if prop_type == 'array':
            items = node.get('items')
            return SchemaProperty(
                kind=PropertyKind.ARRAY,
                items=self._load_property(items, f"{location}/items") if items is not None else None,
                format=fmt,
            )

        if prop_type == 'string':
            return SchemaProperty(
                kind=STRING_FORMATS.get(fmt, PropertyKind.STRING),
                enum=_as_list(node.get('enum')),
                format=fmt,
            )

        if prop_type in PRIMITIVE_PROPERTY_KINDS:
            return SchemaProperty(kind=PRIMITIVE_PROPERTY_KINDS[prop_type], format=fmt)

        if prop_type == 'object' or 'properties' in node or 'additionalProperties' in node:
            additional = node.get('additionalProperties')
            if isinstance(additional, dict) and 'properties' not in node:
                return SchemaProperty(
                    kind=PropertyKind.MAP,
                    items=self._load_property(additional, f"{location}/additionalProperties"),
                )
            return SchemaProperty(
                kind=PropertyKind.OBJECT,
                properties=self._load_properties(node, location),
            )

        if prop_type is not None:
            logger.debug("Unknown property type %r at %s", prop_type, location)
        return SchemaProperty(kind=PropertyKind.UNTYPED, format=fmt)


def _as_list(values: Any) -> Optional[list]:
    if values is None:
        return None
    return list(values)


def _as_text(value: Any) -> Optional[str]:
    # YAML reads an unquoted ``version: 1.0`` as a float
    if value is None:
        return None
    return str(value)
