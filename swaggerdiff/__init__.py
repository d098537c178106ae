"""
SwaggerDiff - Documentation-Driven Contract Validation for Swagger APIs

Compares an actual API description (typically generated from the running
implementation) against an expected one (typically hand-written
documentation) and reports every structural divergence in one go.
"""

from .validator import ContractValidator, validate
from .collector import FailureCollector
from .schema import SchemaResolver, DocumentSchemaResolver
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
from .exceptions import (
    SwaggerDiffError,
    ContractMismatchError,
    ValidationError,
    SchemaParseError,
    ExternalRefError,
    CircularRefError,
    MaxDepthExceededError,
)
from .loader import load_specification
from .runner import ContractCheckRunner

__version__ = "1.0.0"
__all__ = [
    # Validation
    "ContractValidator",
    "validate",
    "FailureCollector",
    "SchemaResolver",
    "DocumentSchemaResolver",
    # Configuration
    "AssertionConfig",
    "AssertionType",
    # Specification tree
    "Specification",
    "Info",
    "PathItem",
    "HttpMethod",
    "Operation",
    "Parameter",
    "ParameterKind",
    "Response",
    "SchemaDefinition",
    "ModelKind",
    "SchemaProperty",
    "PropertyKind",
    # Reports
    "ValidationReport",
    "Mismatch",
    "MismatchType",
    # Errors
    "SwaggerDiffError",
    "ContractMismatchError",
    "ValidationError",
    "SchemaParseError",
    "ExternalRefError",
    "CircularRefError",
    "MaxDepthExceededError",
    # Loading and running
    "load_specification",
    "ContractCheckRunner",
]
