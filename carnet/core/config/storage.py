from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p

from .base import BaseSettings


class PostgresqlSettings(BaseSettings):
    host: p.IPvAnyAddress | str | None = None
    port: t.Annotated[int, ant.Gt(0), ant.Le(65535)] = 5432
    database: str
    driver: t.Literal["postgresql+psycopg"] = "postgresql+psycopg"


class PersistentSettings(BaseSettings):
    postgresql: PostgresqlSettings
    # log every statement, very noisy
    echo: bool = False
    pool_size: t.Annotated[int, ant.Gt(0)] = 5
    pool_pre_ping: bool = True


class StorageSettings(BaseSettings):
    persistent: PersistentSettings
