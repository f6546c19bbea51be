"""Application factory for the carnet API."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import carnet
from carnet.core import BootConfiguration, CarnetContainer, di
from carnet.core.config import CarnetWebSettings
from carnet.model import DeploymentEnvironment

from .route import router

# the frontend dev server is only trusted outside of deployed environments
_cors_envs = frozenset({DeploymentEnvironment.Local, DeploymentEnvironment.Development})


@di.inject
def _create_app(
    config: CarnetWebSettings = di.Provide["config.web.carnet", di.as_(CarnetWebSettings)],
    env: DeploymentEnvironment = di.Provide["env"],
) -> FastAPI:
    app = FastAPI(
        title="Carnet",
        description="School records with time-windowed edit permissions",
        version=carnet.__version__,
    )

    if env in _cors_envs and config.frontend is not None:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[config.frontend.origin, f"http://localhost:{config.frontend.port}"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(router)
    return app


def create_app() -> FastAPI:
    """Entry point for uvicorn, see ``carnet web``."""
    boot_cf = BootConfiguration.from_environ()
    if boot_cf is None:
        raise RuntimeError(f"{BootConfiguration.variable} is not set; start the server with `carnet web`")

    ct = CarnetContainer()
    CarnetContainer.boot(ct, **dict(boot_cf))
    ct.wire(packages=["carnet.web.carnet"])
    return _create_app()
