from __future__ import annotations

import pydantic as p
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from carnet.model import DeploymentEnvironment

from .base import BaseSecrets
from .source import YAMLSecretsSource


class PostgresqlSecrets(BaseSecrets):
    username: p.Secret[str] | None = None
    password: p.Secret[str] | None = None

    def reveal(self) -> tuple[str | None, str | None]:
        """``(username, password)`` in clear, for building a DSN."""
        return (
            self.username.get_secret_value() if self.username else None,
            self.password.get_secret_value() if self.password else None,
        )


class AuthSecrets(BaseSecrets):
    # HS256 signing key of access tokens
    jwt: p.Secret[str]


class Secrets(BaseSecrets):
    """Credentials, from the environment (``CARNET_AUTH__JWT=...``) or ``secrets.yaml``.

    Environment variables win over the file.
    """

    model_config = SettingsConfigDict(env_prefix="CARNET_", env_nested_delimiter="__")

    root: p.AnyUrl
    env: DeploymentEnvironment

    auth: AuthSecrets | None = None
    postgresql: PostgresqlSecrets | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, YAMLSecretsSource(settings_cls)
