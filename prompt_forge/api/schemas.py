"""Pydantic schemas for API request/response validation.

Prompt form bodies are deliberately loose: the idea text is validated by
the workspace so that field errors come back in the workspace response
rather than as FastAPI's generic 422 body.
"""

import re
from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MOBILE_PATTERN = re.compile(r"^\+\d{1,3}\d{4,14}$")
MIN_PASSWORD_LENGTH = 8
MIN_BIRTH_YEAR = 1900


# =============================================================================
# Prompt workspace
# =============================================================================


class RefineRequestBody(BaseModel):
    """Schema for a prompt refinement submission."""

    idea_text: str | None = Field(None, description="The basic prompt idea")
    style: str | None = None
    length: str | None = None
    tone: str | None = None
    include_parameters: bool = Field(
        True, description="Whether style/length/tone should shape the prompt"
    )
    recaptcha_token: str | None = Field(
        None, description="reCAPTCHA v3 token issued for action 'refine_prompt'"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "idea_text": "Write a story about a robot",
                "style": "Narrative",
                "length": "Medium (1 paragraph)",
                "tone": "Friendly",
                "include_parameters": True,
                "recaptcha_token": "03AFcWeA...",
            }
        }
    )

    def form_values(self) -> dict[str, Any]:
        """Form fields without the anti-abuse token."""
        return self.model_dump(exclude={"recaptcha_token"})


class SuggestRequestBody(BaseModel):
    """Schema for a parameter suggestion request."""

    basic_prompt: str | None = None
    recaptcha_token: str | None = Field(
        None, description="reCAPTCHA v3 token issued for action 'suggest_parameters'"
    )

    def form_values(self) -> dict[str, Any]:
        return self.model_dump(exclude={"recaptcha_token"})


class NotificationResponse(BaseModel):
    """A toast the client should display."""

    title: str
    description: str
    variant: str = "default"


class SuggestionResponse(BaseModel):
    suggested_style: str
    suggested_length: str
    suggested_tone: str
    reasoning: str | None = None


class WorkspaceResponse(BaseModel):
    """Schema for the workspace state after a submission."""

    state: str = Field(..., description="'idle', 'submitting', 'success' or 'failed'")
    refined_prompt: str | None = None
    error: str | None = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    suggestion: SuggestionResponse | None = None
    suggestion_state: str = "idle"
    notifications: list[NotificationResponse] = Field(default_factory=list)
    clipboard_text: str | None = Field(
        None, description="Text the client should write to the clipboard"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "state": "success",
                "refined_prompt": "Write a warm, narrative short story...",
                "error": None,
                "field_errors": {},
                "suggestion": None,
                "suggestion_state": "idle",
                "notifications": [
                    {
                        "title": "Prompt Forged!",
                        "description": "Your new prompt has been successfully generated.",
                        "variant": "default",
                    }
                ],
                "clipboard_text": "Write a warm, narrative short story...",
            }
        }
    )


class ParameterOptionsResponse(BaseModel):
    """Choices offered for each refinement parameter."""

    styles: list[str]
    lengths: list[str]
    tones: list[str]
    default_style: str
    default_length: str
    default_tone: str


# =============================================================================
# Accounts
# =============================================================================


def _check_email(value: str) -> str:
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email address.")
    return email


def _check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain at least one uppercase letter.")
    if not re.search(r"[a-z]", value):
        raise ValueError("Password must contain at least one lowercase letter.")
    if not re.search(r"[0-9]", value):
        raise ValueError("Password must contain at least one number.")
    if not re.search(r"[^A-Za-z0-9]", value):
        raise ValueError("Password must contain at least one special character.")
    return value


def check_birth_date(day: str | None, month: str | None, year: str | None) -> None:
    if day is None or month is None or year is None:
        return
    try:
        date(int(year), int(month), int(day))
    except ValueError as ex:
        raise ValueError("The date of birth entered is not a valid date.") from ex


class ProfileFields(BaseModel):
    """Profile fields shared by signup and profile updates."""

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    dob_day: str | None = None
    dob_month: str | None = None
    dob_year: str | None = None
    mobile_number: str | None = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("Name must not be blank.")
        return value

    @field_validator("dob_day")
    @classmethod
    def _check_day(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not re.fullmatch(r"\d{1,2}", value) or not 1 <= int(value) <= 31:
            raise ValueError("Day must be 1-31.")
        return value

    @field_validator("dob_month")
    @classmethod
    def _check_month(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not re.fullmatch(r"\d{1,2}", value) or not 1 <= int(value) <= 12:
            raise ValueError("Month must be 1-12.")
        return value

    @field_validator("dob_year")
    @classmethod
    def _check_year(cls, value: str | None) -> str | None:
        if value is None:
            return None
        current_year = datetime.now(UTC).year
        if not re.fullmatch(r"\d{4}", value) or not (
            MIN_BIRTH_YEAR <= int(value) <= current_year
        ):
            raise ValueError(f"Year must be between {MIN_BIRTH_YEAR} and {current_year}.")
        return value

    @field_validator("mobile_number")
    @classmethod
    def _check_mobile(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not MOBILE_PATTERN.match(value):
            raise ValueError("Invalid mobile number format (e.g., +11234567890).")
        return value

    @model_validator(mode="after")
    def _check_dob(self) -> "ProfileFields":
        check_birth_date(self.dob_day, self.dob_month, self.dob_year)
        return self


class SignupRequest(ProfileFields):
    """Schema for creating an account with e-mail and password."""

    email: str
    password: str = Field(..., max_length=128)
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    dob_day: str
    dob_month: str
    dob_year: str
    mobile_number: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ada@example.com",
                "password": "Analytical1!",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "dob_day": "10",
                "dob_month": "12",
                "dob_year": "1985",
                "mobile_number": "+441234567890",
            }
        }
    )

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        return _check_password(value)


class LoginRequest(BaseModel):
    """Schema for e-mail/password login."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class ProfileUpdateRequest(ProfileFields):
    """Schema for completing or updating a profile. Omitted fields are kept."""


class PasswordChangeRequest(BaseModel):
    """Schema for changing a password after re-authentication."""

    current_password: str
    new_password: str = Field(..., max_length=128)

    @field_validator("new_password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        return _check_password(value)


class UserResponse(BaseModel):
    """Schema for an account profile."""

    id: str
    email: str
    first_name: str
    last_name: str
    dob_day: str | None = None
    dob_month: str | None = None
    dob_year: str | None = None
    mobile_number: str | None = None
    profile_complete: bool
    created_at: datetime


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    error: str
    detail: str | None = None
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Verification service is unavailable. Please try again later.",
                "detail": None,
                "code": "VERIFICATION_FAILED",
            }
        }
    )
