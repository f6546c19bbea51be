import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings

from carnet.model import BaseModel


class _SettingsModel(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    # BaseModel comes second so that its model_dump, which dumps by alias,
    # wins over pydantic's; the "()" and "class" keys of the logging section
    # depend on it
    def __init__(self, cf: t.Mapping[str, t.Any] | None = None, /, **kwargs: t.Any):
        # the container hands out configuration sections as plain dicts
        super().__init__(**{**(cf or {}), **kwargs})


class BaseSettings(_SettingsModel):
    """A section of the YAML configuration."""


class BaseSecrets(_SettingsModel):
    """Credentials; keep the values in ``p.Secret`` so they never print."""
