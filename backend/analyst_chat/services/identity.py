"""Login input checks. There is no credential verification, only shape."""

import re

from analyst_chat.core.errors import ValidationError

_STUDENT_ID = re.compile(r"[0-9]+")
_FULL_NAME = re.compile(r"^\s*\S+(?:\s+\S+)+\s*$")


def validate_student_id(value: object) -> str:
    """Return the trimmed id, or raise if it is empty or not all digits."""
    student_id = "" if value is None else str(value).strip()
    if not student_id:
        raise ValidationError("ID is required")
    if not _STUDENT_ID.fullmatch(student_id):
        raise ValidationError("ID must be numeric")
    return student_id


def validate_name(value: object) -> str:
    name = "" if value is None else str(value).strip()
    if not _FULL_NAME.match(name):
        raise ValidationError("Enter first and last name (alphabets only)")
    return name
