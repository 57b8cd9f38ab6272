"""Exceptions raised by the repositories and mapped to HTTP responses in app.py."""


class BlogError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(BlogError):
    status_code = 400
    message = "Missing fields"


class NotFound(BlogError):
    status_code = 404
    message = "Not found"


class Unauthorized(BlogError):
    status_code = 401
    message = "Unauthorized"


class Forbidden(BlogError):
    status_code = 401
    message = "Not allowed to edit"


class StorageError(BlogError):
    status_code = 500
    message = "Storage error"
