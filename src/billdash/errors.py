class BilldashError(Exception):
    """Base exception for billdash errors."""


class StorageError(BilldashError):
    """Any failure while executing a statement against the database."""


class AuthError(BilldashError):
    """Identity provider failure.

    ``type`` names the failure class; ``CredentialsSignin`` means the
    provider rejected the username/password pair.
    """

    CREDENTIALS_SIGNIN = "CredentialsSignin"
    PROVIDER_ERROR = "ProviderError"
    PROVIDER_UNAVAILABLE = "ProviderUnavailable"

    def __init__(self, message: str, type: str = PROVIDER_ERROR):
        super().__init__(message)
        self.type = type


class LoginRequired(BilldashError):
    """Raised by the session gate when no user is logged in."""
