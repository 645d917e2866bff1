"""JSON wire format for the session and registry records.

Learn: session  → '{"name": ..., "email": ..., "password": ...}'
       registry → '[{...}, {...}]'   (insertion order)

Decoding goes through pydantic, so a record with a missing field or a
non-string value is rejected as a whole rather than half-loaded.
Decoders raise ValueError (pydantic.ValidationError is one) on any
malformed input; AuthManager turns that into "nothing stored".
"""

from typing import Optional

from pydantic import TypeAdapter

from credstore.schemas.user import User

_users_adapter = TypeAdapter(list[User])


def encode_user(user: User) -> str:
    return user.model_dump_json()


def decode_user(text: Optional[str]) -> Optional[User]:
    if text is None:
        return None
    return User.model_validate_json(text)


def encode_users(users: list[User]) -> str:
    return _users_adapter.dump_json(list(users)).decode("utf-8")


def decode_users(text: Optional[str]) -> list[User]:
    if text is None:
        return []
    return _users_adapter.validate_json(text)
