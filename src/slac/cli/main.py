"""SLAC CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """SLAC: simple logic and arithmetic expression compiler."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from slac.cli.expression_cmd import check, compile_cmd, eval_cmd  # noqa: E402
from slac.cli.functions_cmd import functions  # noqa: E402

cli.add_command(eval_cmd)
cli.add_command(compile_cmd)
cli.add_command(check)
cli.add_command(functions)
