"""promptshape CLI entrypoint."""

from __future__ import annotations

import click

from promptshape import __version__


@click.group()
@click.version_option(version=__version__, prog_name="promptshape")
def main() -> None:
    """promptshape — convert chat messages into provider request bodies."""


# Register subcommands
from promptshape.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
