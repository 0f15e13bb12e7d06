"""Error taxonomy for registration, authentication and internal faults."""


class AccessGateError(Exception):
    """Base class for all accessgate errors. Carries a caller-safe message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RegistrationError(AccessGateError):
    """Registration was rejected because a unique key is already taken."""


class DuplicateUsernameError(RegistrationError):
    def __init__(self, message: str = "Error: Username is already taken!") -> None:
        super().__init__(message)


class DuplicateEmailError(RegistrationError):
    def __init__(self, message: str = "Error: Email is already in use!") -> None:
        super().__init__(message)


class AuthenticationError(AccessGateError):
    """The caller could not be authenticated; expected to re-login."""


class InvalidCredentialsError(AuthenticationError):
    """Unknown username or wrong password. The two cases are never distinguished."""

    def __init__(self, message: str = "Invalid username or password.") -> None:
        super().__init__(message)


class TokenError(AuthenticationError):
    """A presented session token was rejected."""


class MalformedTokenError(TokenError):
    def __init__(self, message: str = "Malformed token") -> None:
        super().__init__(message)


class SignatureInvalidError(TokenError):
    def __init__(self, message: str = "Invalid token signature") -> None:
        super().__init__(message)


class TokenExpiredError(TokenError):
    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class InternalError(AccessGateError):
    """
    Fault that is not caused by the caller (misconfiguration, startup ordering,
    signing failure). Surfaced to end users as an opaque error; the cause is kept
    on the exception for operators.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class RoleNotSeededError(InternalError):
    """Default role is missing: the role bootstrap has not run."""


class TokenIssuanceError(InternalError):
    """Signing a session token failed."""


class DuplicateKeyError(AccessGateError):
    """Raised by the credential store when an insert violates a unique constraint."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
