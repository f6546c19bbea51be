from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.orm
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL

from ..config.secrets import PostgresqlSecrets
from ..config.storage import PersistentSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider


def database_url(config: PersistentSettings, secrets: dict[str, t.Any] | None) -> URL:
    pg = config.postgresql
    username, password = PostgresqlSecrets.model_validate(secrets).reveal() if secrets else (None, None)
    return URL.create(
        pg.driver,
        username=username,
        password=password,
        host=str(pg.host) if pg.host is not None else None,
        port=pg.port,
        database=pg.database,
    )


def provide_alembic_config(
    config: PersistentSettings, secrets: dict[str, t.Any] | None, root: Path | NotReady
) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("alembic configuration requested before boot")

    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / "migrations"))
    # alembic's config parser interpolates %, so escape the ones in the password
    url = database_url(config, secrets).render_as_string(hide_password=False)
    ac.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    ac.set_main_option("file_template", "%%(rev)s_%%(slug)s")
    return ac


def provide_engine(
    config: PersistentSettings, secrets: dict[str, t.Any] | None, logging: LoggingProvider
) -> sqlalchemy.Engine:
    engine = sqlalchemy.create_engine(
        database_url(config, secrets),
        echo=config.echo,
        pool_size=config.pool_size,
        pool_pre_ping=config.pool_pre_ping,
        # timestamptz values come back in the session zone; UTCDateTime expects UTC
        connect_args={"options": "-c timezone=UTC"},
    )
    logging.get_logger().info(
        "connected storage engine",
        extra={
            "url": engine.url.render_as_string(hide_password=True),
            "pool_size": config.pool_size,
        },
    )
    return engine


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """A session that begins nothing on its own; callers use ``with session.begin():``"""
    return sqlalchemy.orm.Session(engine, autobegin=False, autoflush=False, expire_on_commit=False)


class PersistentContainer(DeclarativeContainer):
    config: Provider[PersistentSettings] = Configuration(strict=True)
    secrets: Configuration = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    settings: Provider[PersistentSettings] = Singleton(PersistentSettings, config)
    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_config,
        config=settings,
        secrets=secrets.postgresql,
        root=root,
    )
    engine: Provider[sqlalchemy.Engine] = Singleton(
        provide_engine,
        config=settings,
        secrets=secrets.postgresql,
        logging=logging,
    )
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration(strict=True)
    secrets: Configuration = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer,
        config=config.persistent,
        secrets=secrets,
        logging=logging,
        root=root,
    )
