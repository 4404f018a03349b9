"""Service error taxonomy.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. Validation and lookup errors show their own message;
everything else hides the detail behind a generic ``public_message`` and the
detail only goes to the log.
"""


class AppError(Exception):
    status_code: int = 500
    public_message: str = "Internal server error"
    expose_detail: bool = False

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message

    @property
    def message(self) -> str:
        return self.detail if self.expose_detail else self.public_message


class ValidationError(AppError):
    """Malformed identity, name or a missing required field."""

    status_code = 400
    public_message = "Invalid request"
    expose_detail = True


class NotFoundError(AppError):
    status_code = 404
    public_message = "Not found"
    expose_detail = True


class ConfigurationError(AppError):
    """A required upstream credential or endpoint is not configured."""

    status_code = 500
    public_message = "Server configuration error."


class ModelTimeoutError(AppError):
    status_code = 504
    public_message = "The analysis took too long to complete. Please try again."


class UpstreamError(AppError):
    status_code = 500
    public_message = "The analysis service is currently unavailable."


class PersistenceError(AppError):
    status_code = 500
    public_message = "Internal server error"
