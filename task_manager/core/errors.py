class TaskManagerError(Exception):
    """Base class for errors surfaced to API callers."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskManagerError):
    """Missing/empty task text or a malformed update payload."""

    http_status = 400


class NotFoundError(TaskManagerError):
    http_status = 404


class StoreUnavailableError(TaskManagerError):
    """The document store could not be reached or the query failed."""

    http_status = 500
