"""The ``carnet`` command.

Subcommands live in sibling modules, each defining a group of the same name;
a module is imported only when its subcommand is invoked, and is wired into
the container at boot.
"""

from __future__ import annotations

import importlib
import sys
import threading
import traceback
import types
import typing as t
from pathlib import Path

import pydantic as p

import carnet
import carnet.lib.cli as click
from carnet.core import CarnetContainer
from carnet.model import DeploymentEnvironment

_commands = ("policy", "schema", "user", "web")
_config_root = Path(carnet.__file__).resolve().parents[1] / "config"

# modules of the subcommands resolved so far; boot wires them
_loaded: list[types.ModuleType] = []


class LazyGroup(click.Group):
    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(_commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in _commands:
            return None
        module = importlib.import_module(f"{__package__}.{cmd_name}")
        _loaded.append(module)
        return t.cast(click.Command, getattr(module, cmd_name))


@click.group(cls=LazyGroup)
@click.option("-E", "--env", type=click.EnumType(DeploymentEnvironment), default=DeploymentEnvironment.Local)
@click.option("-c", "--config-root", type=click.DirectoryURLType(), default=str(_config_root))
@click.option(
    "-o",
    "--override",
    multiple=True,
    help="override a configuration value, e.g. -o web.carnet.backend.port=8080",
)
@click.option("-D", "--debug", is_flag=True, default=False, help="print tracebacks, capture warnings")
@click.pass_obj
def main(
    ct: CarnetContainer,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    override: tuple[str, ...],
    debug: bool,
):
    CarnetContainer.boot(
        ct,
        debug=debug,
        env=env,
        config_root=config_root,
        override=override,
        wiring=tuple(_loaded),
    )


def execute_command(*argv: str) -> None:
    threading.current_thread().name = "carnet-0"
    prog, *args = argv or sys.argv
    ct = CarnetContainer()

    status = 0
    try:
        with main.make_context(Path(prog).name, args=args) as ctx:
            ctx.obj = ct
            main.invoke(ctx)
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", file=sys.stderr)
        status = 1
    except click.exceptions.Exit as ex:
        status = ex.exit_code
    except click.ClickException as ex:
        ex.show()
        status = ex.exit_code
    except Exception as ex:
        click.echo(click.style("ERROR ", fg="red") + str(ex), file=sys.stderr)
        if "-D" in args or "--debug" in args:
            traceback.print_exc()
        status = -1
    finally:
        ct.shutdown_resources()
    sys.exit(status)


if __name__ == "__main__":
    execute_command(*sys.argv)
