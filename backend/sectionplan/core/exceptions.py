class AppError(Exception):
    """Base error rendered by the API as ``{"message": ..., "details": ...}``."""

    def __init__(self, message: str, status_code: int = 500, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidConfigError(AppError):
    """A configuration snapshot failed strict validation before an optimizer run."""

    def __init__(self, issues: list[dict]):
        super().__init__(
            f"Configuration has {len(issues)} validation error(s)",
            status_code=422,
            details={"errors": issues},
        )
        self.issues = issues


class ConfigurationError(AppError):
    """Server-side settings cannot be turned into optimizer options."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=500, details=details)
