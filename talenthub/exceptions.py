"""
Application error taxonomy

Route handlers translate these into HTTP responses using ``status_code``.
"""


class ApplicationError(Exception):
    """Base error for the application flow"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(ApplicationError):
    status_code = 400


class AuthenticationError(ApplicationError):
    status_code = 401


class ListingNotFoundError(ApplicationError):
    status_code = 404


class ApplicationNotFoundError(ApplicationError):
    status_code = 404


class AIServiceUnavailableError(ApplicationError):
    status_code = 503


class PersistenceError(ApplicationError):
    status_code = 500
