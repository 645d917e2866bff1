"""Input validation for signup and login forms.

Learn: These are deliberately permissive. The email check is NOT an
RFC 5322 parser: it only requires something before and after the
first "@". So "a@b" and "a@@b" both pass. Anything that isn't a str
(None, numbers) fails every check instead of raising.
"""

MIN_PASSWORD_LENGTH = 6


def is_valid_email(value) -> bool:
    """True if the first "@" has at least one character on each side."""
    if not value or not isinstance(value, str):
        return False

    at = value.find("@")
    if at == -1:
        return False
    # No local part
    if at == 0:
        return False
    # No domain part
    if at == len(value) - 1:
        return False
    return True


def is_valid_password(value) -> bool:
    """True if the password has at least MIN_PASSWORD_LENGTH characters."""
    if not value or not isinstance(value, str):
        return False
    return len(value) >= MIN_PASSWORD_LENGTH


def is_required(value) -> bool:
    """True if the value is a str with at least one non-whitespace character."""
    if not value or not isinstance(value, str):
        return False
    return len(value.strip()) > 0
