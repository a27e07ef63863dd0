"""Adapter configuration.

Holds everything an adapter instance needs that is not part of a canonical
record: API and web roots, repository scope, credentials and the retry and
timeout budget.
"""

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_BASE_URL = "https://api.github.com/"
DEFAULT_REPO_DOMAIN_URL = "https://github.com"

ENV_PREFIX = "GH_ADAPTER_"


class HttpAuthType(str, Enum):
    """How credentials are presented to the platform."""

    PASSWORD = "http_password"
    TOKEN = "http_token"


class Credentials(BaseModel):
    """Credentials record handed over by the credential store."""

    model_config = ConfigDict(frozen=True)

    http_auth_type: HttpAuthType = Field(
        HttpAuthType.TOKEN, description="Password or token based authentication"
    )
    username: str | None = Field(
        None, description="Account login, required for password authentication"
    )
    password_or_token: str = Field(..., description="Password or access token")

    @model_validator(mode="after")
    def _require_username_for_password(self) -> "Credentials":
        if self.http_auth_type is HttpAuthType.PASSWORD and not self.username:
            raise ValueError("Password authentication requires a username")
        return self


class RetryPolicy(BaseModel):
    """Bounded retry applied to idempotent read requests."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(3, ge=1, description="Total attempts per request")
    backoff_base: float = Field(0.5, ge=0, description="First backoff in seconds")
    max_backoff: float = Field(8.0, ge=0, description="Upper bound per backoff")
    jitter: float = Field(0.25, ge=0, description="Random extra delay in seconds")


class AdapterConfig(BaseModel):
    """Configuration for one adapter instance."""

    # Defaults go through the URL normalizers too.
    model_config = ConfigDict(validate_default=True)

    provider: str = Field("github", description="Provider name in the registry")
    base_url: str = Field(DEFAULT_BASE_URL, description="API root")
    repo_domain_url: str = Field(
        DEFAULT_REPO_DOMAIN_URL, description="Web root used for human-facing URLs"
    )
    owner: str = Field(..., description="Repository owner (user or organization)")
    repo: str = Field(..., description="Repository name")
    credentials: Credentials | None = Field(
        None, description="Credentials used by authenticate()"
    )
    cache_dir: Path | None = Field(
        None, description="Cache directory owned by the transport collaborator"
    )
    debug: bool = Field(False, description="Verbose request logging in the transport")
    timeout: float = Field(15.0, gt=0, description="Per-request timeout in seconds")
    listing_timeout: float | None = Field(
        None, gt=0, description="Time budget for a whole paginated listing"
    )
    retry: RetryPolicy = Field(default_factory=RetryPolicy)

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("repo_domain_url")
    @classmethod
    def _normalize_domain(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if "://" not in value:
            value = f"https://{value}"
        return value

    @classmethod
    def from_env(
        cls, owner: str | None = None, repo: str | None = None, **overrides: object
    ) -> "AdapterConfig":
        """Build a configuration from ``GH_ADAPTER_*`` environment variables.

        Args:
            owner: Repository owner, overrides GH_ADAPTER_OWNER
            repo: Repository name, overrides GH_ADAPTER_REPO
            **overrides: Any other field, taking precedence over the environment

        Returns:
            AdapterConfig instance

        Raises:
            ValueError: If repository scope or the secret is missing
        """
        owner = owner or os.getenv(f"{ENV_PREFIX}OWNER")
        repo = repo or os.getenv(f"{ENV_PREFIX}REPO")
        secret = os.getenv(f"{ENV_PREFIX}TOKEN") or os.getenv("GITHUB_TOKEN")

        missing = []
        if not owner:
            missing.append(f"{ENV_PREFIX}OWNER")
        if not repo:
            missing.append(f"{ENV_PREFIX}REPO")
        if not secret:
            missing.append(f"{ENV_PREFIX}TOKEN (or GITHUB_TOKEN)")
        if missing:
            raise ValueError(
                f"Environment variables required for the adapter: {', '.join(missing)}"
            )

        values: dict[str, object] = {
            "owner": owner,
            "repo": repo,
            "credentials": Credentials(
                http_auth_type=HttpAuthType(
                    os.getenv(f"{ENV_PREFIX}AUTH_TYPE", HttpAuthType.TOKEN.value)
                ),
                username=os.getenv(f"{ENV_PREFIX}USERNAME"),
                password_or_token=secret,
            ),
            "debug": os.getenv(f"{ENV_PREFIX}DEBUG", "").lower()
            in ("1", "true", "yes"),
        }
        for field, var in (
            ("base_url", "BASE_URL"),
            ("repo_domain_url", "REPO_DOMAIN_URL"),
            ("cache_dir", "CACHE_DIR"),
            ("timeout", "TIMEOUT"),
        ):
            env_value = os.getenv(f"{ENV_PREFIX}{var}")
            if env_value:
                values[field] = env_value
        values.update(overrides)
        return cls.model_validate(values)
