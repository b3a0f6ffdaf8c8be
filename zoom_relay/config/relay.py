"""Relay entrypoint configuration."""
from functools import lru_cache

from pydantic import Field, ValidationError, field_validator

from zoom_relay.config.base import BaseSettings
from zoom_relay.core.allowlist import AddressAllowlist
from zoom_relay.core.exceptions import ConfigurationError


class RelaySettings(BaseSettings):
    """Configuration for the webhook relay."""

    # Service Info
    SERVICE_NAME: str = Field(default="zoom-webhook-relay")
    VERSION: str = Field(default="0.1.0")

    # Listener
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000, ge=1, le=65535)

    # Zoom
    ZOOM_SECRET: str = Field(
        ..., min_length=1, description="Zoom app secret token used for HMAC"
    )
    TIMESTAMP_TOLERANCE_SECONDS: int = Field(
        default=300, ge=0, description="Accepted age of x-zm-request-timestamp"
    )
    ALLOWED_IP_RANGES: str = Field(
        ..., description="Comma separated CIDR blocks allowed to call the relay"
    )
    TRUST_FORWARDED_FOR: bool = Field(
        default=False,
        description="Take the source address from X-Forwarded-For (behind a proxy)",
    )

    # Downstream
    POST_URL: str = Field(..., description="Downstream endpoint receiving events")
    FORWARD_TIMEOUT_SECONDS: float = Field(default=10.0, ge=1.0, le=120.0)
    FORWARD_FOLLOW_REDIRECTS: bool = Field(default=True)

    @field_validator("ALLOWED_IP_RANGES")
    @classmethod
    def validate_ip_ranges(cls, v: str) -> str:
        """Reject an empty or malformed range list up front."""
        try:
            AddressAllowlist.from_config(v)
        except ConfigurationError as e:
            raise ValueError(e.message) from e
        return v

    @field_validator("POST_URL")
    @classmethod
    def validate_post_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("POST_URL must be an http(s) URL")
        return v

    @property
    def allowlist(self) -> AddressAllowlist:
        """Build the allowlist from ALLOWED_IP_RANGES."""
        return AddressAllowlist.from_config(self.ALLOWED_IP_RANGES)


@lru_cache
def get_settings() -> RelaySettings:
    """
    Load settings from the environment.

    Raises:
        ConfigurationError: if a required value is missing or invalid
    """
    try:
        return RelaySettings()  # type: ignore[call-arg]
    except ValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid relay configuration: {', '.join(fields)}",
            details={"fields": fields},
        ) from e
