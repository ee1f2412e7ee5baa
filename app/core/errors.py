"""
Primary-path errors. Routes translate these into HTTPException with the
user-facing message; everything secondary goes through app.utils.best_effort.
"""
from fastapi import status

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
EMAIL_ALREADY_REGISTERED_MESSAGE = "Email already registered"
DATASTORE_UNAVAILABLE_MESSAGE = "Database connection failed. Please try again later."


class AppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request failed"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class EmailAlreadyRegisteredError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = EMAIL_ALREADY_REGISTERED_MESSAGE


class InvalidCredentialsError(AppError):
    # Same message for unknown email and wrong password (no account enumeration)
    status_code = status.HTTP_401_UNAUTHORIZED
    message = INVALID_CREDENTIALS_MESSAGE


class DatastoreUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = DATASTORE_UNAVAILABLE_MESSAGE


class UserNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class SupabaseError(Exception):
    """Raised by the Supabase HTTP clients; only ever seen inside best_effort."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)
