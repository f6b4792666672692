# backend/app/errors.py
"""Error taxonomy shared by the services and the API layer."""


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(AppError):
    """One or more field constraints were violated."""

    status_code = 400
    message = "Validation error"

    def __init__(self, violations: list[str], message: str | None = None):
        super().__init__(message)
        self.violations = list(violations)

    def __str__(self) -> str:
        return f"{self.message}: {'; '.join(self.violations)}"


class NotFoundError(AppError):
    status_code = 404
    message = "Location not found"


class MediaRejectedError(AppError):
    """Uploaded file is not an image or is larger than the ceiling."""

    status_code = 400
    message = "Only image files are allowed"


class StorageFault(AppError):
    """Database or blob store failed; the detail stays in the server log."""

    status_code = 500

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.detail = detail
