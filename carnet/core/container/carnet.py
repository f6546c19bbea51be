from __future__ import annotations

import os
import sys
import types
import typing as t
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import carnet
from carnet.model import BaseModel, DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady
from ..provider import LoggingProvider, provide_logging, TimestampProvider, utcnow
from .auth import AuthContainer
from .storage import StorageContainer

# packages whose functions declare di.Provide defaults
_wired = ("carnet.auth", "carnet.policy", "carnet.storage")


class BootConfiguration(BaseModel):
    """The arguments a container was booted with.

    Exported to the environment so that processes started by uvicorn (reload
    and worker processes) can boot an identical container.
    """

    variable: t.ClassVar[str] = "__CARNET_BOOT"

    debug: bool
    env: DeploymentEnvironment
    config_root: p.FileUrl
    override: tuple[str, ...] = ()

    def export(self) -> None:
        os.environ[self.variable] = self.model_dump_json()

    @classmethod
    def from_environ(cls) -> BootConfiguration | None:
        if raw := os.environ.get(cls.variable):
            return cls.model_validate_json(raw)
        return None


class CarnetContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())

    logging: Provider[LoggingProvider] = Resource(provide_logging, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(
        StorageContainer,
        config=config.storage,
        secrets=secrets,
        logging=logging,
        root=root,
    )
    auth: Provider[AuthContainer] = Container(
        AuthContainer,
        config=config.web.carnet.auth,
        secrets=secrets.auth,
    )

    # edit windows are measured against this clock; tests freeze it
    utcnow: Provider[TimestampProvider] = Object(utcnow)

    _boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: CarnetContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ) -> None:
        """Load configuration into ``ct``, wire it and start logging.

        Secrets are loaded last so that a broken secrets file is reported
        through the configured loggers.
        """
        boot_cf = BootConfiguration(debug=debug, env=env, config_root=config_root, override=override or ())

        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(os.path.dirname(carnet.__file__)).parent)

        settings = Settings(env=env, root=config_root, override=boot_cf.override)
        ct.config.from_pydantic(settings)

        ct.wire(packages=list(_wired))
        modules = [mod for name, mod in sys.modules.items() if name.startswith("carnet.")]
        ct.wire(modules=[*modules, *(wiring or ())])

        logger = ct.logging().get_logger()
        for ov in boot_cf.override:
            key, _, value = ov.partition("=")
            logger.info("overriding configuration parameter", extra={"key": key, "value": value})

        ct.secrets.from_pydantic(Secrets(env=env, root=config_root))
        ct._boot_config.override(boot_cf)
        logger.debug("container booted", extra={"env": env.value, "config_root": str(config_root)})
