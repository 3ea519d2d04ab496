"""Domain error classes.

Raised by the store/queue and mapped to HTTP responses by the handler
registered in `app.main`.
"""


class APIError(Exception):
    status_code = 500

    def __init__(self, message: str = "Internal server error", status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(APIError):
    status_code = 400

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


class NotFoundError(APIError):
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ConflictError(APIError):
    status_code = 409

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message)


__all__ = ["APIError", "ValidationError", "NotFoundError", "ConflictError"]
