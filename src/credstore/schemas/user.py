"""Pydantic schemas for users.

Learn: User is the stored record AND the session record. It is frozen:
once signup creates it, nothing mutates it, so handing out the same
instance as "current user" can't leak changes back into the registry.

Field order (name, email, password) is part of the on-disk format:
model_dump_json() emits fields in declaration order.
"""

from pydantic import BaseModel


# ─── User ───────────────────────────────────────────────

class User(BaseModel):
    name: str
    email: str
    password: str

    model_config = {"frozen": True, "extra": "ignore"}


class UserRead(BaseModel):
    """User without the password: for listings and display."""
    name: str
    email: str

    model_config = {"from_attributes": True}
