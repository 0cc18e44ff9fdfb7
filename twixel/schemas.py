"""
Form Action Payloads

When a form action rejects a submission it answers 400 with an ActionData:
a form-wide error, per-field errors, and the submitted values so the form
can be rendered again without losing what the user typed.
"""

from pydantic import BaseModel


class LoginFields(BaseModel):
    login_type: str
    username: str
    password: str


class LoginFieldErrors(BaseModel):
    username: str | None = None
    password: str | None = None


class TwixFields(BaseModel):
    title: str
    content: str


class TwixFieldErrors(BaseModel):
    title: str | None = None
    content: str | None = None


class ActionData(BaseModel):
    form_error: str | None = None
    field_errors: LoginFieldErrors | TwixFieldErrors | None = None
    fields: LoginFields | TwixFields | None = None


def has_errors(field_errors: BaseModel) -> bool:
    return any(value for value in field_errors.model_dump().values())
