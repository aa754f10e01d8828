"""Validation schemas for the auth forms.

Schemas run before any provider call; violations are reported per field
under the form's own field names (``email``, ``password``,
``confirmPassword``).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72  # provider hashes with bcrypt, which truncates at 72 bytes

FORM_ERROR_KEY = "__form__"


def _check_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


def _check_new_password(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(value.encode("utf-8")) > PASSWORD_MAX_LENGTH:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_LENGTH} characters")
    if not any(c.isupper() for c in value):
        raise ValueError("Password must contain at least one uppercase letter")
    if not any(c.islower() for c in value):
        raise ValueError("Password must contain at least one lowercase letter")
    if not any(c.isdigit() for c in value):
        raise ValueError("Password must contain at least one number")
    return value


class _Form(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class SignInForm(_Form):
    email: str
    password: str
    next: str | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class _NewPasswordForm(_Form):
    password: str
    confirm_password: str = Field(alias="confirmPassword")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_new_password(v)

    @field_validator("confirm_password")
    @classmethod
    def validate_confirmation(cls, v: str, info: ValidationInfo) -> str:
        # password is absent from info.data when it failed its own checks
        password = info.data.get("password")
        if password is not None and v != password:
            raise ValueError("Passwords don't match")
        return v


class SignUpForm(_NewPasswordForm):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class ResetPasswordRequestForm(_Form):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class ResetPasswordForm(_NewPasswordForm):
    pass


def validate_form[F: _Form](schema: type[F], form: Mapping[str, Any]) -> tuple[F | None, dict[str, str]]:
    """Validate submitted fields against ``schema``.

    Returns ``(model, {})`` on success or ``(None, field_errors)`` where
    ``field_errors`` maps each offending form field to its first message.
    Non-string values (file uploads) are ignored.
    """
    data = {key: value for key, value in form.items() if isinstance(value, str)}
    try:
        return schema.model_validate(data), {}
    except ValidationError as e:
        return None, _field_errors(schema, e)


def _field_errors(schema: type[_Form], error: ValidationError) -> dict[str, str]:
    aliases = {name: field.alias or name for name, field in schema.model_fields.items()}
    errors: dict[str, str] = {}
    for item in error.errors():
        loc = item["loc"]
        field = aliases.get(str(loc[0]), str(loc[0])) if loc else FORM_ERROR_KEY
        errors.setdefault(field, _message(item))
    return errors


def _message(item: Mapping[str, Any]) -> str:
    if item["type"] == "missing":
        return "This field is required"
    ctx = item.get("ctx") or {}
    if "error" in ctx:
        return str(ctx["error"])
    return str(item["msg"])
