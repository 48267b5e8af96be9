"""``examflow`` command line.

Subcommand modules are imported only when invoked, and are wired into the
container together with the grading and storage packages when the group
callback boots it.
"""

from __future__ import annotations

import importlib
import sys
import traceback
import types
import typing as t
from pathlib import Path

import pydantic as p

import examflow
import examflow.lib.cli as click
from examflow.core import ExamflowContainer
from examflow.model import DeploymentEnvironment

DefaultConfigRoot = Path(examflow.__file__).resolve().parent.parent / "config"


class ExamflowGroup(click.Group):
    subcommands: t.ClassVar[tuple[str, ...]] = ("exam", "schema", "submission")

    def __init__(self, *args: t.Any, **kwargs: t.Any):
        super().__init__(*args, **kwargs)
        self.loaded: list[types.ModuleType] = []

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.subcommands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in self.subcommands:
            return None
        module = importlib.import_module(f"{__package__}.{cmd_name}")
        self.loaded.append(module)
        return getattr(module, cmd_name)


@click.group(cls=ExamflowGroup)
@click.option(
    "-E",
    "--env",
    type=click.EnumType(DeploymentEnvironment),
    default=DeploymentEnvironment.Local.value,
    help="deployment environment, selects the env.d/ overlay",
)
@click.option("-c", "--config-root", type=click.DirectoryURL(), default=str(DefaultConfigRoot))
@click.option("-s", "--secrets-path", type=click.DirectoryURL(), default=None)
@click.option("-o", "--override", multiple=True, help="override a setting, e.g. -o logging.root.level=DEBUG")
@click.option("-D", "--debug", is_flag=True, default=False, help="show tracebacks and capture warnings")
@click.pass_context
def main(
    ctx: click.Context,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    secrets_path: p.FileUrl | None,
    override: tuple[str, ...],
    debug: bool,
) -> None:
    """Exam catalog, submission and schema administration."""
    group = t.cast(ExamflowGroup, ctx.command)
    ExamflowContainer.boot(
        t.cast(ExamflowContainer, ctx.obj),
        debug=debug,
        env=env,
        config_root=config_root,
        secrets_path=secrets_path,
        override=override,
        wiring=tuple(group.loaded),
    )


def execute_command(*argv: str) -> t.NoReturn:
    args = list(argv or sys.argv)
    prog, rest = Path(args[0]).name, args[1:]
    container = ExamflowContainer()

    try:
        main.main(args=rest, prog_name=prog, obj=container, standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.exceptions.Exit as e:
        sys.exit(e.exit_code)
    except (click.Abort, EOFError, KeyboardInterrupt):
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(click.style("ERROR ", fg="red", bold=True) + str(e), err=True)
        booted = bool(container.boot_config())
        if container.debug() if booted else ("-D" in rest or "--debug" in rest):
            traceback.print_exc()
        sys.exit(1)
    finally:
        container.shutdown_resources()
    sys.exit(0)


if __name__ == "__main__":
    execute_command(*sys.argv)
