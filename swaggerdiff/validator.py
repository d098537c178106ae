"""Documentation-driven contract validation for SwaggerDiff."""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Optional

from .models import (
    AssertionConfig,
    AssertionType,
    HttpMethod,
    Info,
    Mismatch,
    MismatchType,
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
    ValidationReport,
)
from .collector import FailureCollector
from .schema import SchemaResolver, DocumentSchemaResolver
from .exceptions import ValidationError, MaxDepthExceededError
from .utils import (
    describe_key_difference,
    filter_ignored_properties,
    format_key,
    is_empty,
    key_set_difference,
    kind_name,
    prefix_paths,
    remove_keys,
)

logger = logging.getLogger(__name__)

# Order in which the methods of a path are walked.
METHOD_ORDER = (
    HttpMethod.GET,
    HttpMethod.DELETE,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.PATCH,
    HttpMethod.OPTIONS,
)

SIMPLE_PARAMETER_KINDS = frozenset({
    ParameterKind.PATH,
    ParameterKind.QUERY,
    ParameterKind.HEADER,
    ParameterKind.FORM,
    ParameterKind.COOKIE,
})


class ContractValidator:
    """
    Walks an actual and an expected specification in lock-step.

    Stages, each gated by its AssertionType:

    1. Info: version and/or full metadata equality
    2. Paths: path keys, then operations, parameters and responses
    3. Definitions: definition keys, model kinds, then resolved properties

    Every divergence is recorded and the walk carries on; ``validate()``
    raises them together as one ContractMismatchError at the end.
    """

    def __init__(self, actual: Specification, config: Optional[AssertionConfig] = None):
        """
        Initialize the validator.

        Args:
            actual: The specification under test (typically generated at runtime)
            config: Assertion configuration (uses defaults if not provided)
        """
        if actual is None:
            raise ValidationError("actual is required")
        if not isinstance(actual, Specification):
            raise ValidationError(
                "actual must be a Specification",
                {"type": type(actual).__name__}
            )
        self.actual = actual
        self.config = config or AssertionConfig()
        self._collector = FailureCollector()
        self._resolver: Optional[SchemaResolver] = None

    def validate(self, expected: Specification, resolver: SchemaResolver):
        """
        Validate the actual specification against ``expected``.

        Raises:
            ContractMismatchError: listing every mismatch, if any were found
            ValidationError: if the inputs themselves are unusable
        """
        self._run(expected, resolver).finish()

    def check(self, expected: Specification, resolver: SchemaResolver) -> ValidationReport:
        """Same walk as ``validate()`` but returns the report instead of raising."""
        return self._run(expected, resolver).report()

    @property
    def mismatches(self) -> list[Mismatch]:
        """Mismatches of the most recent run."""
        return list(self._collector.mismatches)

    def _run(self, expected: Specification, resolver: SchemaResolver) -> FailureCollector:
        self._validate_inputs(expected, resolver)
        self._collector = FailureCollector()
        self._resolver = resolver

        if not any(self._is_enabled(t) for t in (
            AssertionType.VERSION,
            AssertionType.INFO,
            AssertionType.PATHS,
            AssertionType.DEFINITIONS,
        )):
            logger.warning("No top-level assertion category is enabled, nothing will be compared")

        self._validate_info(self.actual.info, expected.info)

        if self._is_enabled(AssertionType.PATHS):
            expected_paths = self._filter_expected_paths(expected.paths)
            self._validate_paths(self.actual.paths, expected_paths)

        if self._is_enabled(AssertionType.DEFINITIONS):
            expected_definitions = remove_keys(
                expected.definitions,
                self.config.definitions_to_ignore_in_expected
            )
            self._validate_definitions(self.actual.definitions, expected_definitions)

        logger.debug(
            "Validation finished: %d checks, %d mismatches",
            self._collector.checks_performed,
            len(self._collector.mismatches)
        )
        return self._collector

    def _validate_inputs(self, expected: Any, resolver: Any):
        """Validate input parameters."""
        if expected is None:
            raise ValidationError("expected is required")
        if not isinstance(expected, Specification):
            raise ValidationError(
                "expected must be a Specification",
                {"type": type(expected).__name__}
            )
        if resolver is None:
            raise ValidationError("resolver is required")

    def _filter_expected_paths(self, paths: Optional[dict]) -> dict:
        """Drop ignored paths, then apply the configured prefix."""
        prefix = self.config.paths_prepend_expected or ""
        ignored = self.config.paths_to_ignore_in_expected
        kept = {
            key: value for key, value in (paths or {}).items()
            if key not in ignored and f"{prefix}{key}" not in ignored
        }
        return prefix_paths(kept, prefix)

    # ----------------------------
    # Info
    # ----------------------------

    def _validate_info(self, actual_info: Optional[Info], expected_info: Optional[Info]):
        actual_info = actual_info or Info()
        expected_info = expected_info or Info()

        # Version changes with every release, so it's OFF by default.
        if self._is_enabled(AssertionType.VERSION):
            self._assert_equal(
                actual_info.version,
                expected_info.version,
                "Checking Version",
                "version"
            )

        # Everything, which tends to be brittle.
        if self._is_enabled(AssertionType.INFO):
            self._collector.check()
            differing = [
                f.name for f in fields(Info)
                if getattr(actual_info, f.name) != getattr(expected_info, f.name)
            ]
            if differing:
                self._collector.record(
                    "Checking Info",
                    MismatchType.VALUE_MISMATCH,
                    f"Info fields differ: {', '.join(differing)}",
                    expected={name: getattr(expected_info, name) for name in differing},
                    actual={name: getattr(actual_info, name) for name in differing},
                )

    # ----------------------------
    # Paths and operations
    # ----------------------------

    def _validate_paths(self, actual_paths: Optional[dict], expected_paths: dict):
        if self._check_key_set(actual_paths, expected_paths, "Checking Paths"):
            for path_name, actual_path in actual_paths.items():
                self._validate_path(path_name, actual_path, expected_paths.get(path_name))

    def _validate_path(
        self,
        path_name: str,
        actual_path: Optional[PathItem],
        expected_path: Optional[PathItem]
    ):
        if expected_path is None:
            return
        actual_path = actual_path or PathItem()

        self._collector.check()
        if actual_path.operation_count != expected_path.operation_count:
            self._collector.record(
                f"Checking number of operations of path '{path_name}'",
                MismatchType.COUNT_MISMATCH,
                f"Expected {expected_path.operation_count} operation(s) "
                f"but found {actual_path.operation_count}",
                expected=expected_path.operation_count,
                actual=actual_path.operation_count,
            )

        for method in METHOD_ORDER:
            self._validate_operation(
                actual_path.get(method),
                expected_path.get(method),
                path_name,
                method.name
            )

    def _validate_operation(
        self,
        actual_operation: Optional[Operation],
        expected_operation: Optional[Operation],
        path: str,
        http_method: str
    ):
        context = f"Checking '{http_method}' operation of path '{path}'"
        self._collector.check()

        if expected_operation is None:
            if actual_operation is not None:
                self._collector.record(
                    context,
                    MismatchType.EXTRA,
                    f"Operation {http_method} {path} is not documented",
                )
            return

        if actual_operation is None:
            self._collector.record(
                context,
                MismatchType.MISSING,
                f"Operation {http_method} {path} is missing",
            )
            return

        logger.debug("Validating %s %s", http_method, path)

        self._check_values(
            self._resolver.get_actual_consumes(actual_operation),
            self._resolver.get_expected_consumes(expected_operation),
            f"Checking 'consumes' of '{http_method}' operation of path '{path}'"
        )
        self._check_values(
            self._resolver.get_actual_produces(actual_operation),
            self._resolver.get_expected_produces(expected_operation),
            f"Checking 'produces' of '{http_method}' operation of path '{path}'"
        )
        self._validate_parameters(
            actual_operation.parameters,
            expected_operation.parameters,
            http_method,
            path
        )
        self._validate_responses(
            actual_operation.responses,
            expected_operation.responses,
            http_method,
            path
        )

    # ----------------------------
    # Parameters
    # ----------------------------

    def _validate_parameters(
        self,
        actual_parameters: Optional[list[Parameter]],
        expected_parameters: Optional[list[Parameter]],
        http_method: str,
        path: str
    ):
        context = f"Checking parameters of '{http_method}' operation of path '{path}'"
        self._collector.check()

        if is_empty(expected_parameters):
            if not is_empty(actual_parameters):
                names = [_parameter_label(p) for p in actual_parameters]
                self._collector.record(
                    context,
                    MismatchType.NOT_EMPTY,
                    f"Expected no parameters but found {_quoted(names)}",
                    expected=[],
                    actual=names,
                )
            return

        if is_empty(actual_parameters):
            names = [_parameter_label(p) for p in expected_parameters]
            self._collector.record(
                context,
                MismatchType.MISSING,
                f"Expected parameters {_quoted(names)} but found none",
                expected=names,
                actual=[],
            )
            return

        if len(actual_parameters) != len(expected_parameters):
            missing, extra = key_set_difference(
                [_parameter_label(p) for p in actual_parameters],
                [_parameter_label(p) for p in expected_parameters]
            )
            message = (
                f"Expected {len(expected_parameters)} parameter(s) "
                f"but found {len(actual_parameters)}"
            )
            detail = describe_key_difference(missing, extra)
            if detail:
                message = f"{message} ({detail})"
            self._collector.record(
                context,
                MismatchType.COUNT_MISMATCH,
                message,
                expected=len(expected_parameters),
                actual=len(actual_parameters),
            )

        # REF parameters have no name and are keyed by their reference
        expected_by_name = {_parameter_label(p): p for p in expected_parameters}
        for actual_parameter in actual_parameters:
            label = _parameter_label(actual_parameter)
            self._validate_parameter(
                actual_parameter,
                expected_by_name.get(label),
                label,
                http_method,
                path
            )

    def _validate_parameter(
        self,
        actual: Parameter,
        expected: Optional[Parameter],
        name: str,
        http_method: str,
        path: str
    ):
        if expected is None:
            return

        context = f"Checking parameter '{name}' of '{http_method}' operation of path '{path}'"
        if not self._assert_same_kind(actual, expected, context, "parameter"):
            return

        if expected.kind == ParameterKind.BODY:
            self._validate_model(
                actual.schema,
                expected.schema,
                f"Checking model of parameter '{name}' of '{http_method}' operation of path '{path}'"
            )
        elif expected.kind in SIMPLE_PARAMETER_KINDS:
            self._assert_equal(actual.type, expected.type, context, "type")
            self._check_values(actual.enum, expected.enum, f"{context} (enum)")
        elif expected.kind == ParameterKind.REF:
            self._assert_equal(actual.ref, expected.ref, context, "reference")

    # ----------------------------
    # Responses
    # ----------------------------

    def _validate_responses(
        self,
        actual_responses: Optional[dict],
        expected_responses: Optional[dict],
        http_method: str,
        path: str
    ):
        context = f"Checking responses of '{http_method}' operation of path '{path}'"
        if self._check_key_set(actual_responses, expected_responses, context):
            for code, actual_response in actual_responses.items():
                self._validate_response(
                    actual_response,
                    expected_responses.get(code),
                    code,
                    http_method,
                    path
                )

    def _validate_response(
        self,
        actual: Optional[Response],
        expected: Optional[Response],
        code: str,
        http_method: str,
        path: str
    ):
        if expected is None:
            return
        actual = actual or Response()

        where = f"response '{code}' of '{http_method}' operation of path '{path}'"
        self._validate_property(
            actual.schema,
            expected.schema,
            f"Checking response schema of {where}"
        )

        context = f"Checking response headers of {where}"
        if self._check_key_set(actual.headers, expected.headers, context):
            for header_name, actual_header in actual.headers.items():
                self._validate_property(
                    actual_header,
                    expected.headers.get(header_name),
                    f"Checking response header '{header_name}' of {where}"
                )

    # ----------------------------
    # Definitions, models and properties
    # ----------------------------

    def _validate_definitions(self, actual_definitions: Optional[dict], expected_definitions: dict):
        if self._check_key_set(actual_definitions, expected_definitions, "Checking Definitions"):
            for name, actual_definition in actual_definitions.items():
                self._validate_definition(name, actual_definition, expected_definitions.get(name))

    def _validate_definition(
        self,
        name: str,
        actual: Optional[SchemaDefinition],
        expected: Optional[SchemaDefinition]
    ):
        if expected is None:
            return

        logger.debug("Validating definition %s", name)
        self._validate_model(actual, expected, f"Checking model of definition '{name}'")

        actual_properties = (
            self._resolver.resolve_properties_from_actual(actual) if actual is not None else {}
        )
        expected_properties = filter_ignored_properties(
            name,
            self._resolver.resolve_properties_from_expected(expected),
            self.config.properties_to_ignore_in_expected
        )

        context = f"Checking properties of definition '{name}'"
        if self._check_key_set(actual_properties, expected_properties, context):
            for property_name, actual_property in actual_properties.items():
                self._validate_property(
                    actual_property,
                    expected_properties.get(property_name),
                    f"Checking property '{property_name}' of definition '{name}'"
                )

    def _validate_model(
        self,
        actual: Optional[SchemaDefinition],
        expected: Optional[SchemaDefinition],
        context: str
    ):
        if expected is None or not self._is_enabled(AssertionType.MODELS):
            return

        if not self._assert_same_kind(actual, expected, context, "model"):
            return

        if expected.kind == ModelKind.REF:
            self._assert_equal(actual.ref, expected.ref, context, "reference")
        elif expected.kind == ModelKind.ARRAY:
            self._validate_property(actual.items, expected.items, f"{context} (items)")
        # OBJECT and COMPOSED models are compared through their resolved properties.

    def _validate_property(
        self,
        actual: Optional[SchemaProperty],
        expected: Optional[SchemaProperty],
        context: str,
        depth: int = 0
    ):
        if expected is None or not self._is_enabled(AssertionType.PROPERTIES):
            return

        if depth > self.config.max_depth:
            raise MaxDepthExceededError(self.config.max_depth, context)

        if not self._assert_same_kind(actual, expected, context, "property"):
            return

        if expected.kind == PropertyKind.REF:
            if self._is_enabled(AssertionType.REF_PROPERTIES):
                self._assert_equal(actual.ref, expected.ref, context, "reference")
        elif expected.kind == PropertyKind.ARRAY:
            if self._is_enabled(AssertionType.ARRAY_PROPERTIES):
                self._validate_property(actual.items, expected.items, f"{context} (items)", depth + 1)
        elif expected.kind == PropertyKind.STRING:
            if self._is_enabled(AssertionType.STRING_PROPERTIES):
                self._check_values(actual.enum, expected.enum, f"{context} (enum)")
        elif expected.kind == PropertyKind.MAP:
            self._validate_property(actual.items, expected.items, f"{context} (values)", depth + 1)
        elif expected.kind == PropertyKind.OBJECT:
            if self._check_key_set(actual.properties, expected.properties, context):
                for name, actual_member in actual.properties.items():
                    self._validate_property(
                        actual_member,
                        expected.properties.get(name),
                        f"{context} (member '{name}')",
                        depth + 1
                    )

    # ----------------------------
    # Assertion primitives
    # ----------------------------

    def _check_key_set(self, actual: Optional[dict], expected: Optional[dict], context: str) -> bool:
        """
        Apply the key-set contract to two mappings.

        Expected empty means actual must be empty too. Otherwise actual must
        be non-empty with exactly the same keys, in any order.

        Returns:
            True if the caller should go on to compare the entries
        """
        self._collector.check()

        if is_empty(expected):
            if not is_empty(actual):
                keys = [format_key(k) for k in actual]
                self._collector.record(
                    context,
                    MismatchType.NOT_EMPTY,
                    f"Expected no entries but found {_quoted(keys)}",
                    expected=[],
                    actual=keys,
                )
            return False

        if is_empty(actual):
            keys = [format_key(k) for k in expected]
            self._collector.record(
                context,
                MismatchType.MISSING,
                f"Expected {_quoted(keys)} but found none",
                expected=keys,
                actual=[],
            )
            return False

        missing, extra = key_set_difference(actual.keys(), expected.keys())
        if missing or extra:
            if missing and extra:
                mismatch_type = MismatchType.KEY_SET_MISMATCH
            elif missing:
                mismatch_type = MismatchType.MISSING
            else:
                mismatch_type = MismatchType.EXTRA
            self._collector.record(
                context,
                mismatch_type,
                describe_key_difference(missing, extra),
                expected=[format_key(k) for k in missing],
                actual=[format_key(k) for k in extra],
            )
        return True

    def _check_values(self, actual: Optional[list], expected: Optional[list], context: str):
        """Key-set contract for plain value lists such as media types and enums."""
        self._collector.check()

        if is_empty(expected):
            if not is_empty(actual):
                self._collector.record(
                    context,
                    MismatchType.NOT_EMPTY,
                    f"Expected no values but found {_quoted(actual)}",
                    expected=[],
                    actual=list(actual),
                )
            return

        if is_empty(actual):
            self._collector.record(
                context,
                MismatchType.MISSING,
                f"Expected {_quoted(expected)} but found none",
                expected=list(expected),
                actual=[],
            )
            return

        missing, extra = key_set_difference(actual, expected)
        if missing and extra:
            mismatch_type = MismatchType.KEY_SET_MISMATCH
        elif missing:
            mismatch_type = MismatchType.MISSING
        elif extra:
            mismatch_type = MismatchType.EXTRA
        else:
            return
        self._collector.record(
            context,
            mismatch_type,
            describe_key_difference(missing, extra),
            expected=list(expected),
            actual=list(actual),
        )

    def _assert_same_kind(self, actual: Any, expected: Any, context: str, what: str) -> bool:
        """Record a kind mismatch (or a missing node) and report whether kinds agree."""
        self._collector.check()

        if actual is None:
            self._collector.record(
                context,
                MismatchType.MISSING,
                f"Expected {kind_name(expected)} {what} but found none",
                expected=expected.kind,
                actual=None,
            )
            return False

        if actual.kind != expected.kind:
            self._collector.record(
                context,
                MismatchType.KIND_MISMATCH,
                f"Expected {kind_name(expected)} {what} but found {kind_name(actual)}",
                expected=expected.kind,
                actual=actual.kind,
            )
            return False

        return True

    def _assert_equal(self, actual: Any, expected: Any, context: str, what: str):
        self._collector.check()
        if actual != expected:
            self._collector.record(
                context,
                MismatchType.VALUE_MISMATCH,
                f"Expected {what} {expected!r} but found {actual!r}",
                expected=expected,
                actual=actual,
            )

    def _is_enabled(self, assertion_type: AssertionType) -> bool:
        return self.config.is_assertion_enabled(assertion_type)


def _quoted(values: Any) -> str:
    return ", ".join(f"'{v}'" for v in values)


def _parameter_label(parameter: Parameter) -> str:
    if parameter.name is None and parameter.ref is not None:
        return f"$ref:{parameter.ref}"
    return str(parameter.name)


def validate(
    actual: Specification,
    expected: Specification,
    config: Optional[AssertionConfig] = None,
    resolver: Optional[SchemaResolver] = None
):
    """
    Convenience function to validate one specification against another.

    Args:
        actual: The specification under test
        expected: The reference specification
        config: Optional assertion configuration
        resolver: Optional resolver (a DocumentSchemaResolver over both documents by default)

    Raises:
        ContractMismatchError: listing every mismatch, if any were found
    """
    if not isinstance(expected, Specification):
        raise ValidationError(
            "expected must be a Specification",
            {"type": type(expected).__name__}
        )
    validator = ContractValidator(actual, config)
    validator.validate(expected, resolver or DocumentSchemaResolver(actual, expected))
