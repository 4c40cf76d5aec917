"""Configuration management for the storefront API."""

import json
import logging
from functools import lru_cache
from typing import Annotated

import boto3
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

# Secrets Manager key -> Settings field
SECRET_FIELDS = {
    "shopify_customer_shop_id": "shopify_customer_shop_id",
    "shopify_customer_client_id": "shopify_customer_client_id",
}


class SecretsSourceSettings(BaseSettings):
    """Where to look for secrets before falling back to the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    use_secrets_manager: bool = Field(default=False)
    secrets_manager_secret_name: str = Field(default="storefront_api")
    aws_region: str = Field(default="us-east-2")


def get_aws_secrets(secret_name: str, region_name: str) -> dict:
    """Fetch secrets from AWS Secrets Manager."""
    try:
        session = boto3.session.Session()
        client = session.client(
            service_name="secretsmanager",
            region_name=region_name,
        )
        response = client.get_secret_value(SecretId=secret_name)
        return json.loads(response["SecretString"])
    except Exception as e:
        logger.warning(f"Failed to fetch AWS secrets: {e}. Falling back to environment variables.")
        return {}


class Settings(BaseSettings):
    """Application settings loaded from environment variables (and optionally AWS Secrets Manager)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Shopify Customer Account API
    shopify_customer_shop_id: str = Field(..., min_length=1, description="Shop ID (identity tenant)")
    shopify_customer_client_id: str = Field(..., min_length=1, description="Customer Account API client ID")
    customer_api_version: str = Field(default="unstable")

    # Public URL of the storefront front-end, used to build the redirect URI
    app_url: str = Field(..., description="Public base URL of the storefront app")
    redirect_path: str = Field(default="/account/authorize")
    post_login_path: str = Field(default="/account")

    # Login request
    login_scopes: str = Field(default="openid email customer-account-api:full")
    login_locale: str | None = Field(default="en")

    # Cookie lifetimes (seconds)
    attempt_cookie_max_age: int = Field(default=10 * 60)
    access_token_default_max_age: int = Field(default=60 * 60)
    refresh_token_max_age: int = Field(default=30 * 24 * 60 * 60)

    # Server Configuration
    server_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=8000)
    server_env: str = Field(default="development")

    # Outbound HTTP
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # CORS Configuration
    # Comma separated in the environment, so skip the JSON decoding of list fields
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:4200", "http://localhost:3000"]
    )

    # Logging
    log_level: str = Field(default="INFO")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("app_url")
    @classmethod
    def normalize_app_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("app_url must be an absolute http(s) URL")
        return v

    @field_validator("redirect_path", "post_login_path")
    @classmethod
    def ensure_leading_slash(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"

    @property
    def discovery_url(self) -> str:
        return (
            f"https://shopify.com/authentication/{self.shopify_customer_shop_id}"
            "/.well-known/openid-configuration"
        )

    @property
    def customer_api_url(self) -> str:
        return (
            f"https://shopify.com/{self.shopify_customer_shop_id}"
            f"/account/customer/api/{self.customer_api_version}/graphql"
        )

    @property
    def redirect_uri(self) -> str:
        # The provider sends the browser back to the front-end, which forwards code + state here
        return f"{self.app_url}{self.redirect_path}"

    @property
    def post_login_url(self) -> str:
        return f"{self.app_url}{self.post_login_path}"

    @property
    def scopes(self) -> list[str]:
        return self.login_scopes.split()

    @property
    def is_production(self) -> bool:
        return self.server_env.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.server_env.lower() != "development"


@lru_cache
def get_settings() -> Settings:
    """Build the settings once, preferring Secrets Manager values when enabled."""
    source = SecretsSourceSettings()
    overrides: dict[str, str] = {}

    if source.use_secrets_manager:
        secrets = get_aws_secrets(source.secrets_manager_secret_name, source.aws_region)
        overrides = {
            field: secrets[key] for key, field in SECRET_FIELDS.items() if secrets.get(key)
        }
        logger.info(f"Loaded {len(overrides)} setting(s) from AWS Secrets Manager")

    return Settings(**overrides)
