class AppError(Exception):
    """Failure of a single operation, reported to the caller as-is."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409


class AlreadyProcessed(Conflict):
    # Terminal-state guard; clients have always seen this one as a 400.
    status_code = 400
