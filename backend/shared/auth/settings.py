"""Auth provider settings."""

from urllib.parse import urlencode

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # Supabase project URL and anon key -- required, no default.
    # The application fails to start if either is not set.
    provider_url: str = Field(min_length=1)
    provider_key: str = Field(min_length=1)

    # Public base URL used to build absolute links in provider emails
    app_url: str = "http://localhost:8710"

    # Cookie Secure flag -- True in production, False for local dev (HTTP)
    cookie_secure: bool = False

    @field_validator("app_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def callback_url(self, next_path: str | None = None) -> str:
        """Absolute URL of the auth callback route, optionally carrying ``next``."""
        url = f"{self.app_url}/auth/callback"
        if next_path:
            url = f"{url}?{urlencode({'next': next_path}, safe='/')}"
        return url
