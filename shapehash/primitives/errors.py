"""Error types for shapehash primitives.

Expected failures (a malformed encoded payload) are reported through result
objects and never abort a fingerprint. These exceptions cover the rest:
- DecodeError: carried inside DecodeResult, never raised past the engine
- DepthExceededError / CyclicStructureError: fatal for the call
- ConfigurationError: invalid merge directives or config files
"""

from typing import Any, Optional


class FingerprintError(Exception):
    """Base exception for fingerprinting failures.

    Attributes:
        message: Error description.
        cause: Optional underlying exception being wrapped.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        """Initialize FingerprintError.

        Args:
            message: Description of the error.
            cause: Optional exception that triggered this error.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause


class DecodeError(FingerprintError):
    """Encoded payload or decoded content could not be interpreted.

    Attributes:
        message: Description of the error.
        field: Root-level field whose value failed to decode, if known.
        encoding: Encoding the value was declared with.
        decoded_type: Content type the value was declared with.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        encoding: Any = None,
        decoded_type: Any = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.field = field
        self.encoding = encoding
        self.decoded_type = decoded_type

    def for_field(self, field: str) -> "DecodeError":
        """Return a copy of this error attributed to a root-level field."""
        return DecodeError(
            f"{field}: {self.message}",
            field=field,
            encoding=self.encoding,
            decoded_type=self.decoded_type,
            cause=self.cause,
        )


class DepthExceededError(FingerprintError):
    """Value nesting went past the configured depth limit.

    Attributes:
        message: Description of the error.
        depth: Depth at which the walk stopped.
        limit: Configured maximum depth.
        path: Dotted path to the offending position.
    """

    def __init__(self, message: str, depth: int, limit: int, path: str = ""):
        super().__init__(message)
        self.depth = depth
        self.limit = limit
        self.path = path


class CyclicStructureError(DepthExceededError):
    """A container refers back to one of its own ancestors."""


class ConfigurationError(FingerprintError):
    """Invalid configuration or merge directive.

    Attributes:
        message: Description of the error.
        field: Optional field that caused the error.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
