"""Auth manager: registry, session, and the signup/login/logout state machine.

Learn: One AuthManager owns three pieces of in-memory state:
- registered users (append-only, unique by exact email)
- current user (at most one; the active session)
- loading flag (true until the initial storage read finishes)

Lifecycle: UNINITIALIZED → LOADING → READY. initialize() runs once,
reads the persisted session + registry, and ALWAYS ends in READY:
unreadable or corrupt storage just means "nothing stored yet".

Every mutating operation follows the same order:
    validate → business rules → mutate memory → persist
Memory is the source of truth; storage is a best-effort mirror. If the
write fails the caller gets PERSISTENCE_FAILURE, but the in-memory
change stays (no rollback).

All operations run under one asyncio.Lock, so two concurrent signups
for the same email can't both pass the uniqueness check.

There is no global instance: build one at startup and pass it around.
"""

import asyncio
import secrets
from enum import Enum
from typing import Optional

import structlog

from credstore.auth.errors import AuthErrorKind, AuthResult
from credstore.auth.validation import is_required, is_valid_email, is_valid_password
from credstore.config import Settings
from credstore.events.types import (
    AUTH_INIT_OPEN_FAILED,
    AUTH_INIT_READ_FAILED,
    AUTH_INITIALIZED,
    AUTH_LOGIN_REJECTED,
    AUTH_LOGIN_SUCCEEDED,
    AUTH_LOGOUT,
    AUTH_NOT_READY,
    AUTH_PERSIST_FAILED,
    AUTH_SIGNUP_REJECTED,
    AUTH_SIGNUP_SUCCEEDED,
)
from credstore.schemas.user import User
from credstore.storage import build_store
from credstore.storage.base import KeyValueStore, StorageError
from credstore.storage.codec import decode_user, decode_users, encode_user, encode_users

logger = structlog.get_logger()

DEFAULT_SESSION_KEY = "session"
DEFAULT_REGISTRY_KEY = "registry"


class AuthState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class AuthManager:
    """Owns the session and the user registry; persists both via a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        session_key: str = DEFAULT_SESSION_KEY,
        registry_key: str = DEFAULT_REGISTRY_KEY,
    ):
        self.store = store
        self.session_key = session_key
        self.registry_key = registry_key

        self._current_user: Optional[User] = None
        self._users: list[User] = []
        self._state = AuthState.UNINITIALIZED
        self._lock = asyncio.Lock()

    # ─── Construction ─────────────────────────────────────

    @classmethod
    async def create(cls, store: KeyValueStore, **kwargs) -> "AuthManager":
        """Build a manager and load persisted state before returning it."""
        manager = cls(store, **kwargs)
        await manager.initialize()
        return manager

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthManager":
        """Build a (not yet initialized) manager over the configured backend."""
        return cls(
            build_store(settings),
            session_key=settings.session_key,
            registry_key=settings.registry_key,
        )

    async def __aenter__(self) -> "AuthManager":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ─── Read-only state ──────────────────────────────────

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def is_loading(self) -> bool:
        """True until initialization has finished."""
        return self._state is not AuthState.READY

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    @property
    def registered_users(self) -> tuple[User, ...]:
        """Snapshot of the registry in signup order."""
        return tuple(self._users)

    # ─── Lifecycle ────────────────────────────────────────

    async def initialize(self) -> None:
        """Open the store and load session + registry. Never raises for storage errors."""
        async with self._lock:
            if self._state is not AuthState.UNINITIALIZED:
                return
            self._state = AuthState.LOADING
            try:
                try:
                    await self.store.open()
                except StorageError as e:
                    logger.warning(AUTH_INIT_OPEN_FAILED, backend=self.store.name, error=str(e))
                    return

                self._current_user = await self._load_session()
                self._users = await self._load_registry()
            finally:
                self._state = AuthState.READY
                logger.info(
                    AUTH_INITIALIZED,
                    backend=self.store.name,
                    users=len(self._users),
                    session=self._current_user is not None,
                )

    async def close(self) -> None:
        await self.store.close()

    async def _load_session(self) -> Optional[User]:
        try:
            return decode_user(await self.store.get(self.session_key))
        except (StorageError, ValueError) as e:
            logger.warning(AUTH_INIT_READ_FAILED, key=self.session_key, error=str(e))
            return None

    async def _load_registry(self) -> list[User]:
        try:
            return decode_users(await self.store.get(self.registry_key))
        except (StorageError, ValueError) as e:
            logger.warning(AUTH_INIT_READ_FAILED, key=self.registry_key, error=str(e))
            return []

    # ─── Signup ───────────────────────────────────────────

    async def signup(self, name: str, email: str, password: str) -> AuthResult:
        """Register a new user. Does NOT log them in."""
        if self._state is not AuthState.READY:
            return self._not_ready("signup")

        async with self._lock:
            kind = self._check_signup(name, email, password)
            if kind is not None:
                logger.info(AUTH_SIGNUP_REJECTED, reason=kind.value)
                return AuthResult.failure(kind)

            try:
                user = User(name=name, email=email, password=password)
                payload = encode_users([*self._users, user])
            except ValueError as e:
                # Unserializable text never reaches the registry
                logger.error(AUTH_PERSIST_FAILED, operation="signup", error=str(e))
                return AuthResult.failure(
                    AuthErrorKind.PERSISTENCE_FAILURE,
                    "Failed to save user data",
                    cause=e,
                )

            self._users.append(user)

            try:
                await self.store.set(self.registry_key, payload)
            except StorageError as e:
                logger.error(AUTH_PERSIST_FAILED, operation="signup", error=str(e))
                return AuthResult.failure(
                    AuthErrorKind.PERSISTENCE_FAILURE,
                    "Failed to save user data",
                    cause=e,
                    user=user,
                )

            logger.info(AUTH_SIGNUP_SUCCEEDED, email=email, users=len(self._users))
            return AuthResult.success(user)

    def _check_signup(self, name, email, password) -> Optional[AuthErrorKind]:
        """First failing rule wins; order is part of the contract."""
        if not is_required(name):
            return AuthErrorKind.NAME_REQUIRED
        if not is_required(email):
            return AuthErrorKind.EMAIL_REQUIRED
        if not is_required(password):
            return AuthErrorKind.PASSWORD_REQUIRED
        if not is_valid_email(email):
            return AuthErrorKind.INVALID_EMAIL_FORMAT
        if not is_valid_password(password):
            return AuthErrorKind.PASSWORD_TOO_SHORT
        if self._find_user(email) is not None:
            return AuthErrorKind.EMAIL_ALREADY_REGISTERED
        return None

    # ─── Login ────────────────────────────────────────────

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate against the registry and start the session."""
        if self._state is not AuthState.READY:
            return self._not_ready("login")

        async with self._lock:
            if not is_required(email):
                return AuthResult.failure(AuthErrorKind.EMAIL_REQUIRED)
            if not is_required(password):
                return AuthResult.failure(AuthErrorKind.PASSWORD_REQUIRED)
            if not is_valid_email(email):
                return AuthResult.failure(AuthErrorKind.INVALID_EMAIL_FORMAT)

            found = self._find_user(email)
            # Same error for unknown email and wrong password
            if found is None or not _passwords_match(password, found.password):
                logger.info(AUTH_LOGIN_REJECTED, email=email)
                return AuthResult.failure(AuthErrorKind.INVALID_CREDENTIALS)

            user = found.model_copy()
            self._current_user = user

            try:
                await self.store.set(self.session_key, encode_user(user))
            except (StorageError, ValueError) as e:
                logger.error(AUTH_PERSIST_FAILED, operation="login", error=str(e))
                return AuthResult.failure(
                    AuthErrorKind.PERSISTENCE_FAILURE,
                    "Failed to save session",
                    cause=e,
                    user=user,
                )

            logger.info(AUTH_LOGIN_SUCCEEDED, email=email)
            return AuthResult.success(user)

    # ─── Logout ───────────────────────────────────────────

    async def logout(self) -> AuthResult:
        """Clear the session. Always effective in memory, best-effort on disk."""
        if self._state is not AuthState.READY:
            return self._not_ready("logout")

        async with self._lock:
            previous = self._current_user
            self._current_user = None

            try:
                await self.store.remove(self.session_key)
            except StorageError as e:
                logger.error(AUTH_PERSIST_FAILED, operation="logout", error=str(e))
                return AuthResult.failure(
                    AuthErrorKind.PERSISTENCE_FAILURE,
                    "Failed to clear session",
                    cause=e,
                )

            logger.info(AUTH_LOGOUT, email=previous.email if previous else None)
            return AuthResult.success()

    # ─── Helpers ──────────────────────────────────────────

    def _find_user(self, email: str) -> Optional[User]:
        """Exact, case-sensitive email lookup."""
        for user in self._users:
            if user.email == email:
                return user
        return None

    def _not_ready(self, operation: str) -> AuthResult:
        logger.warning(AUTH_NOT_READY, operation=operation, state=self._state.value)
        return AuthResult.failure(AuthErrorKind.NOT_READY)


def _passwords_match(given: str, stored: str) -> bool:
    # surrogatepass: lone surrogates compare as bytes instead of raising
    return secrets.compare_digest(
        given.encode("utf-8", "surrogatepass"),
        stored.encode("utf-8", "surrogatepass"),
    )
