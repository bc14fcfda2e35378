"""Domain exceptions for the health calculation service.

Only out-of-range input and missing formula prerequisites fail a
calculation; every other condition degrades with confidence or severity
metadata instead. The FastAPI handlers in `core.error_handlers` turn any
`AppException` into the uniform error body.
"""

import math
from typing import Optional, Any, Dict, Sequence


class AppException(Exception):
    """Root of every exception the service raises on purpose.

    Attributes:
        message: Text shown to the caller.
        status_code: HTTP status the API responds with.
        details: Structured context, serialized into the error body.
    """

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AppException):
    """A stored resource (such as a calculation snapshot) does not exist."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            f"{resource} with id '{identifier}' not found",
            status_code=404,
            details={"resource": resource, "id": identifier},
        )


class ValidationError(AppException):
    """Input failed validation.

    Args:
        message: What was wrong.
        field: Name of the offending field, if there is one.
        status_code: 400 unless a subclass says otherwise.
    """

    def __init__(self, message: str, field: Optional[str] = None, status_code: int = 400):
        super().__init__(message, status_code=status_code, details={"field": field} if field else {})


class InputRangeError(ValidationError):
    """Raised when a profile value is physically nonsensical.

    The engine never guesses past these inputs: age outside [13, 120],
    non-positive or absurd body measurements, non-finite BMI and similar.
    """

    def __init__(
        self,
        field: str,
        value: Any,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            if minimum is not None and maximum is not None:
                message = f"{field} must be between {minimum} and {maximum}. Received: {value}"
            elif minimum is not None:
                message = f"{field} must be greater than {minimum}. Received: {value}"
            else:
                message = f"{field} is out of range. Received: {value}"
        super().__init__(message, field=field, status_code=422)
        # NaN and infinity are not valid JSON
        shown = str(value) if isinstance(value, float) and not math.isfinite(value) else value
        self.details.update({"value": shown, "minimum": minimum, "maximum": maximum})
        self.field = field
        self.value = value


class MissingPrerequisiteError(AppException):
    """Raised when a requested formula lacks the data it needs.

    Example: a Katch-McArdle override without a body-fat percentage. The
    caller may retry with another formula or drop the override.
    """

    def __init__(self, formula: str, missing: Sequence[str]):
        missing = list(missing)
        message = f"{formula} requires {', '.join(missing)}"
        super().__init__(message, status_code=400, details={"formula": formula, "missing": missing})
        self.formula = formula
        self.missing = missing


class WeatherLookupError(AppException):
    """Raised by weather providers when a lookup fails or times out.

    The context detector converts it into a lower-confidence context, so it
    never reaches API callers.
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        details = {"provider": provider} if provider else {}
        super().__init__(message, status_code=503, details=details)


class DatabaseError(AppException):
    """The snapshot store could not complete an operation ('create', 'health_check')."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, status_code=500, details={"operation": operation} if operation else {})


class InsufficientDataError(AppException):
    """A batch input holds fewer records than an operation needs."""

    def __init__(self, message: str, minimum_required: Optional[int] = None):
        details = {"minimum_required": minimum_required} if minimum_required else {}
        super().__init__(message, status_code=400, details=details)


class ConfigurationError(AppException):
    """An environment setting is missing or invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, status_code=500, details={"config_key": config_key} if config_key else {})
