# -*- coding: utf-8 -*-
"""Location: ./schemock/exceptions.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Schemock error taxonomy.

Every error raised by the generation engine or the route layer derives from
``SchemockError`` and carries a stable error code, optional structured
details and a short hint for the user:

- ``ConfigurationError`` (E001): invalid settings or builder options
- ``SchemaParseError`` (E100): the schema is not a well-formed schema object
- ``SchemaRefError`` (E101): a ``$ref`` pointer cannot be resolved
- ``CircularReferenceError`` (E102): a cycle was found and the cycle policy is ``error``
- ``ValidationError`` (E400): a request body or option value is out of bounds

Examples:
    >>> err = SchemaRefError("Cannot resolve $ref: #/definitions/Missing", "#/definitions/Missing")
    >>> err.code
    'E101'
    >>> err.details
    {'ref': '#/definitions/Missing'}
    >>> err.to_dict()["error"]
    'SchemaRefError'
"""

# Standard
from typing import Any, Dict, Optional

# Third-Party
import orjson


class SchemockError(Exception):
    """Base class for all Schemock errors.

    Attributes:
        message: Human readable message
        code: Stable error code (``E001`` ... ``E499``)
        details: Optional structured details
        hint: Optional hint on how to fix the problem
    """

    default_hint: Optional[str] = None

    def __init__(self, message: str, code: str = "E000", details: Optional[Any] = None, hint: Optional[str] = None):
        """Initialize the error.

        Args:
            message: Human readable message.
            code: Stable error code.
            details: Optional structured details.
            hint: Optional hint, falls back to the class default hint.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint or self.default_hint

    @property
    def kind(self) -> str:
        """Return the error kind used in response bodies.

        Returns:
            str: The class name of the error.

        Examples:
            >>> ValidationError("bad", "name").kind
            'ValidationError'
        """
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error into a structured response body.

        Returns:
            Dict[str, Any]: Error body with kind, code, message, details and hint.

        Examples:
            >>> body = ConfigurationError("cache_max_size must be >= 1").to_dict()
            >>> body["code"], body["error"]
            ('E001', 'ConfigurationError')
        """
        return {
            "error": self.kind,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "hint": self.hint,
        }


class ConfigurationError(SchemockError):
    """Raised when settings or builder options are invalid."""

    default_hint = "Check your settings, environment variables or builder options."

    def __init__(self, message: str, details: Optional[Any] = None, hint: Optional[str] = None):
        """Initialize the error.

        Args:
            message: Human readable message.
            details: Optional structured details.
            hint: Optional hint.
        """
        super().__init__(message, "E001", details, hint)


class SchemaParseError(SchemockError):
    """Raised when a schema is not a well-formed schema object."""

    default_hint = "Ensure your schema follows the JSON Schema Draft 7 vocabulary."

    def __init__(self, message: str, details: Optional[Any] = None, hint: Optional[str] = None):
        """Initialize the error.

        Args:
            message: Human readable message.
            details: Optional structured details.
            hint: Optional hint.
        """
        super().__init__(message, "E100", details, hint)


class SchemaRefError(SchemockError):
    """Raised when a ``$ref`` pointer cannot be resolved against the root schema."""

    default_hint = "Verify that the referenced definition exists in your schema."

    def __init__(self, message: str, ref: str, hint: Optional[str] = None):
        """Initialize the error.

        Args:
            message: Human readable message.
            ref: The pointer that failed to resolve.
            hint: Optional hint.
        """
        super().__init__(message, "E101", {"ref": ref}, hint)
        self.ref = ref


class CircularReferenceError(SchemockError):
    """Raised on a reference cycle when the cycle policy is ``error``."""

    default_hint = "Break the cycle or switch circular_ref_policy to 'placeholder'."

    def __init__(self, ref: str, path: Optional[list] = None):
        """Initialize the error.

        Args:
            ref: The pointer that re-entered the active resolution path.
            path: The active resolution path, outermost first.
        """
        super().__init__(f"Circular reference detected: {ref}", "E102", {"ref": ref, "path": path or []})
        self.ref = ref


class ValidationError(SchemockError):
    """Raised when a request body or an option value fails validation."""

    def __init__(self, message: str, field: str, value: Optional[Any] = None, hint: Optional[str] = None):
        """Initialize the error.

        Args:
            message: Human readable message.
            field: Dotted path of the offending field.
            value: The offending value.
            hint: Optional hint.
        """
        super().__init__(message, "E400", {"field": field, "value": value}, hint or f"The provided value for '{field}' does not match the schema requirements.")
        self.field = field
        self.value = value


def format_error(error: BaseException) -> str:
    """Format an error for console output.

    Args:
        error: Any exception.

    Returns:
        str: ``[code] message`` followed by the hint and details for Schemock errors,
        the plain message otherwise.

    Examples:
        >>> print(format_error(SchemaRefError("Cannot resolve $ref: #/x", "#/x")))
        [E101] Cannot resolve $ref: #/x
        <BLANKLINE>
        Hint: Verify that the referenced definition exists in your schema.
        <BLANKLINE>
        Details:
        {
          "ref": "#/x"
        }
        >>> format_error(RuntimeError("boom"))
        'boom'
    """
    if not isinstance(error, SchemockError):
        return str(error)

    message = f"[{error.code}] {error.message}"
    if error.hint:
        message += f"\n\nHint: {error.hint}"
    if error.details:
        message += "\n\nDetails:\n" + orjson.dumps(error.details, option=orjson.OPT_INDENT_2, default=str).decode()
    return message
