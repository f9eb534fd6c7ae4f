"""
Error taxonomy of the order engine.

Every failure the engine reports is one of these, so the transport layer can
translate them without knowing which operation raised.
"""


class OrderEngineError(Exception):
    """Base class. Carries an HTTP-ish status and a machine readable code."""

    status_code = 400

    def __init__(self, message: str, error: str, detail: str | None = None):
        self.message = message
        self.error = error
        self.detail = detail or message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message, "detail": self.detail}


class NotFoundError(OrderEngineError):
    """Entity does not exist, or exists but is not visible to the caller."""

    status_code = 404

    def __init__(self, entity: str, key=None):
        if key is None:
            detail = f"No {entity} exists"
        else:
            detail = f"No {entity} exists with: {key}"
        super().__init__(f"{entity} not found", f"{entity.upper()}_NOT_FOUND", detail)
        self.entity = entity
        self.key = key


class InvalidValueError(OrderEngineError):
    status_code = 400

    def __init__(self, entity: str, field: str, value):
        super().__init__(
            f"Invalid value for {entity} {field}: '{value}'",
            f"{entity.upper()}_{field.upper()}_INVALID",
            f"'{value}' is not a valid value for {field} in {entity}",
        )
        self.entity = entity
        self.field = field
        self.value = value


class NullValueError(OrderEngineError):
    status_code = 400

    def __init__(self, entity: str, field: str):
        super().__init__(
            f"{entity} {field} cannot be null",
            f"{entity.upper()}_{field.upper()}_NULL",
            f"The {field} field for {entity} must not be null",
        )
        self.entity = entity
        self.field = field


class AlreadyHasValueError(OrderEngineError):
    """The operation would be a no-op."""

    status_code = 409

    def __init__(self, entity: str, field: str, value):
        super().__init__(
            f"{entity} already has {field} as {value}",
            f"{entity.upper()}_ALREADY_HAS_{str(value).upper()}",
            f"{entity} already has {value} in field: {field}",
        )
        self.entity = entity
        self.field = field
        self.value = value


class AlreadyInStateError(AlreadyHasValueError):
    def __init__(self, entity: str, status):
        super().__init__(entity, "status", getattr(status, "value", status))


class InvalidOperationError(OrderEngineError):
    status_code = 400

    def __init__(self, entity: str, operation: str):
        super().__init__(
            f"Invalid operation on {entity}: {operation}",
            f"{entity.upper()}_INVALID_OPERATION",
            f"Operation '{operation}' is not allowed on {entity}",
        )
        self.entity = entity
        self.operation = operation


class ConcurrencyConflictError(OrderEngineError):
    """Lock held by another request or a version check failed."""

    status_code = 409

    def __init__(self, resource: str):
        super().__init__(
            f"Concurrent modification of {resource}",
            "CONCURRENT_MODIFICATION",
            f"{resource} is being modified by another operation, retry the request",
        )
        self.resource = resource
