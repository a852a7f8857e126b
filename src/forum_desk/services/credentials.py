"""Password and username checks used by account screens.

Both functions return an empty string when the input is acceptable and a
human-readable error otherwise. Neither is consulted by the forum
collections.
"""

from __future__ import annotations

from enum import Enum

__all__ = ["PASSWORD_SPECIAL_CHARACTERS", "check_username", "evaluate_password"]

PASSWORD_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = "~`!@#$%^&*()_-+={}[]|\\:;\"'<>,.?/"

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 16
USERNAME_SEPARATORS = "._-"


def evaluate_password(text: str) -> str:
    """Return an empty string for a valid password, else what is wrong with it."""
    if not text:
        return "*** Error *** The password is empty!"
    if len(text) > PASSWORD_MAX_LENGTH:
        return f"*** Error *** The password exceeds the maximum {PASSWORD_MAX_LENGTH} characters!"

    found_upper = found_lower = found_digit = found_special = False
    for char in text:
        if char.isupper():
            found_upper = True
        elif char.islower():
            found_lower = True
        elif char.isdigit():
            found_digit = True
        elif char in PASSWORD_SPECIAL_CHARACTERS:
            found_special = True
        else:
            return "*** Error *** An invalid character has been found!"
    long_enough = len(text) >= PASSWORD_MIN_LENGTH

    missing = []
    if not found_upper:
        missing.append("- One upper case letter must be included (A-Z)")
    if not found_lower:
        missing.append("- One lower case letter must be included (a-z)")
    if not found_digit:
        missing.append("- One numeric digit must be included (0-9)")
    if not found_special:
        missing.append("- One special character must be included")
    if not long_enough:
        missing.append(f"- The password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not missing:
        return ""
    return (
        "*** Error *** The password is missing the following requirements:\n\n"
        + "".join(line + "\n" for line in missing)
        + "\n- Conditions were not satisfied"
    )


class _UsernameState(Enum):
    START = 0
    BODY = 1
    AFTER_SEPARATOR = 2


def check_username(text: str) -> str:
    """Run the username state machine over ``text``.

    A username starts with a letter, continues with letters, digits and
    single separators (``.``, ``_``, ``-``) each followed by a letter or
    digit, and is 4 to 16 characters long. A trailing separator is only
    subject to the length check.
    """
    if not text:
        return "\n*** ERROR *** The input is empty"

    state = _UsernameState.START
    size = 0
    for char in text:
        if state is _UsernameState.START:
            if not char.isalpha():
                return "*** ERROR *** A UserName must start with A-Z or a-z.\n"
            state = _UsernameState.BODY
        elif state is _UsernameState.BODY:
            if char.isalnum():
                state = _UsernameState.BODY
            elif char in USERNAME_SEPARATORS:
                state = _UsernameState.AFTER_SEPARATOR
            else:
                return (
                    "*** ERROR *** A UserName character may only contain the characters "
                    "A-Z, a-z, 0-9, ., _, -.\n"
                )
        else:
            if not char.isalnum():
                return (
                    "*** ERROR *** A UserName character after a period, minus, or underscore "
                    "must be A-Z, a-z, or 0-9.\n"
                )
            state = _UsernameState.BODY
        size += 1
        if size > USERNAME_MAX_LENGTH:
            return f"*** ERROR *** A UserName must have no more than {USERNAME_MAX_LENGTH} characters.\n"

    if size < USERNAME_MIN_LENGTH:
        return f"*** ERROR *** A UserName must have at least {USERNAME_MIN_LENGTH} characters.\n"
    return ""
