class MessFeedbackError(Exception):
    """Base for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(MessFeedbackError):
    status_code = 400


class AuthError(MessFeedbackError):
    status_code = 401


class MissingToken(AuthError):
    def __init__(self, message: str = "Access denied. No token provided."):
        super().__init__(message)


class InvalidToken(AuthError):
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class InvalidCredentials(AuthError):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class Forbidden(AuthError):
    status_code = 403

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class ConflictError(MessFeedbackError):
    status_code = 409


class DuplicateAccount(ConflictError):
    def __init__(self, message: str = "Email already exists. Please use a different email address."):
        super().__init__(message)


class NotFoundError(MessFeedbackError):
    status_code = 404


class StorageError(MessFeedbackError):
    """Underlying storage fault; the raw driver message is passed through."""

    status_code = 500

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__("Storage error")
