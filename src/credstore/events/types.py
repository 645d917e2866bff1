"""Log event name constants.

Learn: Centralizing event names as constants prevents typos and makes
it easy to grep every place a given event is emitted. They are the
first positional argument to structlog calls:

    logger.info(AUTH_LOGIN_SUCCEEDED, email=email)
"""

# ─── Initialization ─────────────────────────────────────

AUTH_INITIALIZED = "auth.initialized"
AUTH_INIT_OPEN_FAILED = "auth.init_open_failed"
AUTH_INIT_READ_FAILED = "auth.init_read_failed"

# ─── Operations ─────────────────────────────────────────

AUTH_SIGNUP_SUCCEEDED = "auth.signup_succeeded"
AUTH_SIGNUP_REJECTED = "auth.signup_rejected"
AUTH_LOGIN_SUCCEEDED = "auth.login_succeeded"
AUTH_LOGIN_REJECTED = "auth.login_rejected"
AUTH_LOGOUT = "auth.logout"
AUTH_NOT_READY = "auth.not_ready"

# ─── Persistence ────────────────────────────────────────

AUTH_PERSIST_FAILED = "auth.persist_failed"
