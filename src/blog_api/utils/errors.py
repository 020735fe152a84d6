"""
Domain exceptions raised by the service layer and the route handlers
"""


class BlogApiError(Exception):
    """Base class for errors the API translates into HTTP responses"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BlogApiError):
    """A required field is missing or a request body is malformed"""

    status_code = 400


class StorageError(BlogApiError):
    """The persistence layer could not be reached or rejected the operation"""

    status_code = 500
