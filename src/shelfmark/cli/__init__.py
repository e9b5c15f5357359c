# ABOUTME: CLI package for Shelfmark, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from shelfmark.cli.commands import inspect_cmd


@click.group()
@click.version_option(package_name="shelfmark")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output from the readers.")
def cli(verbose: bool) -> None:
    """Shelfmark - read normalized metadata from EPUB and comic archives."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(show_path=False)],
        )


cli.add_command(inspect_cmd.inspect)
