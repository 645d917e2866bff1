"""credstore: local credential store with a single persisted session.

Registers users, checks logins against the stored credentials, and keeps
one active session that survives restarts. Storage is pluggable
(in-memory, JSON file, Redis) behind a small key-value interface.
"""

__version__ = "0.1.0"
