"""Auth error kinds and the tagged result returned by AuthManager.

Learn: AuthManager operations never raise for expected failures. They
return an AuthResult whose `error` carries one AuthErrorKind, so callers
can branch with a plain `match result.error.kind:` instead of parsing
exception strings.

Kinds fall into four categories:
- validation    : deterministic, same input fails the same way
- credentials   : one combined kind, never says which half was wrong
- persistence   : the storage write failed; memory was already updated
- lifecycle     : operation called before initialization finished

Every message is short and stable, safe to show to the user verbatim.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from credstore.auth.validation import MIN_PASSWORD_LENGTH
from credstore.schemas.user import User


class AuthErrorKind(str, Enum):
    NAME_REQUIRED = "name_required"
    EMAIL_REQUIRED = "email_required"
    PASSWORD_REQUIRED = "password_required"
    INVALID_EMAIL_FORMAT = "invalid_email_format"
    PASSWORD_TOO_SHORT = "password_too_short"
    EMAIL_ALREADY_REGISTERED = "email_already_registered"
    INVALID_CREDENTIALS = "invalid_credentials"
    PERSISTENCE_FAILURE = "persistence_failure"
    NOT_READY = "not_ready"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def field(self) -> str:
        """Form field the error belongs to: name, email, password or general."""
        return _FIELDS.get(self, "general")

    @property
    def category(self) -> str:
        return _CATEGORIES.get(self, "validation")


_MESSAGES: dict[AuthErrorKind, str] = {
    AuthErrorKind.NAME_REQUIRED: "Name is required",
    AuthErrorKind.EMAIL_REQUIRED: "Email is required",
    AuthErrorKind.PASSWORD_REQUIRED: "Password is required",
    AuthErrorKind.INVALID_EMAIL_FORMAT: "Invalid email format",
    AuthErrorKind.PASSWORD_TOO_SHORT: (
        f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    ),
    AuthErrorKind.EMAIL_ALREADY_REGISTERED: "Email already registered",
    AuthErrorKind.INVALID_CREDENTIALS: "Invalid credentials",
    AuthErrorKind.PERSISTENCE_FAILURE: "Failed to save data",
    AuthErrorKind.NOT_READY: "Authentication is still loading",
}

_FIELDS: dict[AuthErrorKind, str] = {
    AuthErrorKind.NAME_REQUIRED: "name",
    AuthErrorKind.EMAIL_REQUIRED: "email",
    AuthErrorKind.INVALID_EMAIL_FORMAT: "email",
    AuthErrorKind.EMAIL_ALREADY_REGISTERED: "email",
    AuthErrorKind.PASSWORD_REQUIRED: "password",
    AuthErrorKind.PASSWORD_TOO_SHORT: "password",
}

_CATEGORIES: dict[AuthErrorKind, str] = {
    AuthErrorKind.INVALID_CREDENTIALS: "credentials",
    AuthErrorKind.PERSISTENCE_FAILURE: "persistence",
    AuthErrorKind.NOT_READY: "lifecycle",
}


class AuthError(Exception):
    """One failed auth operation.

    Returned inside AuthResult; only raised by AuthResult.raise_for_error().
    `cause` holds the underlying StorageError for persistence failures.
    """

    def __init__(
        self,
        kind: AuthErrorKind,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.kind = kind
        self.message = message or kind.message
        self.cause = cause
        super().__init__(self.message)

    @property
    def field(self) -> str:
        return self.kind.field

    def __eq__(self, other) -> bool:
        if not isinstance(other, AuthError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))

    def __repr__(self) -> str:
        return f"AuthError({self.kind.name}, {self.message!r})"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of signup / login / logout.

    `user` is the affected user on success (registered or logged-in),
    None for logout. `error` is set on failure.
    """

    error: Optional[AuthError] = None
    user: Optional[User] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, user: Optional[User] = None) -> "AuthResult":
        return cls(user=user)

    @classmethod
    def failure(
        cls,
        kind: AuthErrorKind,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
        user: Optional[User] = None,
    ) -> "AuthResult":
        return cls(error=AuthError(kind, message, cause), user=user)

    def raise_for_error(self) -> "AuthResult":
        """Raise the carried AuthError, if any. Returns self on success."""
        if self.error is not None:
            raise self.error
        return self
