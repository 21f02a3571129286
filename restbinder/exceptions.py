"""
Custom exceptions for restbinder.

Configuration errors are raised while the route table and type metadata are
being built and are meant to abort startup. Resolution errors are raised per
request and are recoverable by the transport layer.
"""
from typing import List, Optional, Sequence


class RestBinderError(Exception):
    """Base exception for restbinder errors."""

    pass


class ConfigurationError(RestBinderError):
    """Raised when endpoint metadata is structurally invalid."""

    pass


class DuplicateRouteNameError(ConfigurationError):
    """Raised when two endpoints resolve to the same route name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Duplicate route name: {name}")


class PathPlaceholderError(ConfigurationError):
    """Raised when path placeholders and PATH inputs do not line up."""

    pass


class DuplicateInputError(ConfigurationError):
    """Raised when an endpoint declares the same variable name twice."""

    pass


class InvalidTypeError(ConfigurationError):
    """Raised when a Type or TypeHint is malformed."""

    pass


class UnknownTypeError(ConfigurationError):
    """Raised when a declared type name is neither a scalar kind nor registered."""

    def __init__(self, type_name: str, where: Optional[str] = None):
        self.type_name = type_name
        self.where = where
        message = f"Unknown type: {type_name}"
        if where:
            message += f" (declared on {where})"
        super().__init__(message)


class HandlerNotFoundError(ConfigurationError):
    """Raised when a controller class or handler method cannot be located."""

    pass


class DeclarationError(ConfigurationError):
    """Raised when declarative endpoint metadata fails validation."""

    def __init__(self, message: str = "Invalid endpoint declaration", original_exception=None):
        self.message = message
        self.original_exception = original_exception
        super().__init__(self.message)


class ResolutionError(RestBinderError):
    """Base class for per-request resolution failures."""

    status_code = 500

    def __init__(self, method: str, path: str, message: Optional[str] = None):
        self.method = method
        self.path = path
        super().__init__(message or f"{method} {path}")


class NotFoundError(ResolutionError):
    """Raised when no route matches the request path."""

    status_code = 404

    def __init__(self, method: str, path: str):
        super().__init__(method, path, f"No route found for {method} {path}")


class MethodNotAllowedError(ResolutionError):
    """Raised when the path matches a route but the verb does not."""

    status_code = 405

    def __init__(self, method: str, path: str, allowed_methods: Sequence[str]):
        self.allowed_methods: List[str] = list(allowed_methods)
        super().__init__(
            method,
            path,
            f"Method {method} not allowed for {path} (allowed: {', '.join(self.allowed_methods)})",
        )
