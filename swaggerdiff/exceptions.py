"""Custom exceptions for SwaggerDiff."""


class SwaggerDiffError(Exception):
    """Base exception for SwaggerDiff errors."""
    pass


class ContractMismatchError(SwaggerDiffError, AssertionError):
    """Raised once, at the end of a validation run, listing every mismatch found."""
    def __init__(self, mismatches: list):
        self.mismatches = list(mismatches)
        lines = [f"{len(self.mismatches)} contract mismatch(es) found:"]
        for i, mismatch in enumerate(self.mismatches, start=1):
            lines.append(f"  {i}) {mismatch}")
        super().__init__("\n".join(lines))


class ValidationError(SwaggerDiffError):
    """Raised when input validation fails."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SchemaParseError(SwaggerDiffError):
    """Raised when a Swagger document cannot be turned into a specification tree."""
    def __init__(self, message: str, location: str = None, reason: str = None):
        super().__init__(message)
        self.message = message
        self.location = location
        self.reason = reason


class ExternalRefError(SwaggerDiffError):
    """Raised when an external $ref is encountered."""
    def __init__(self, ref: str):
        super().__init__(f"External $ref not allowed: {ref}")
        self.ref = ref


class MaxDepthExceededError(SwaggerDiffError):
    """Raised when maximum recursion depth is exceeded."""
    def __init__(self, depth: int, context: str):
        super().__init__(f"Maximum depth ({depth}) exceeded while {context}")
        self.depth = depth
        self.context = context


class CircularRefError(SwaggerDiffError):
    """Raised when a definition inherits from itself."""
    def __init__(self, chain: list):
        super().__init__(f"Circular reference detected: {' -> '.join(chain)}")
        self.chain = list(chain)
