"""
API Errors — exceptions raised by services, mapped to HTTP at the route boundary.
"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class AggregationError(Exception):
    """One constituent query of a fan-out failed; the whole result is discarded."""

    def __init__(self, task_name, cause):
        super().__init__(f"Aggregation task '{task_name}' failed: {cause}")
        self.task_name = task_name
        self.cause = cause
