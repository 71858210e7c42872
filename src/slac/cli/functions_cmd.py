"""Functions CLI command: list the standard library."""

import json

import click

from slac.environment import StaticEnvironment
from slac.functions import FunctionCategory
from slac.stdlib import extend_environment

_CATEGORIES = [category.value for category in FunctionCategory]


@click.command()
@click.option(
    "--category",
    default=None,
    type=click.Choice(_CATEGORIES, case_sensitive=False),
    help="Only list functions of this category.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print documentation as JSON.")
def functions(category: str | None, as_json: bool):
    """List the standard library functions."""
    environment = extend_environment(StaticEnvironment())

    if as_json:
        click.echo(json.dumps(environment.export_documentation(), indent=2))
        return

    selected = FunctionCategory(category.lower()) if category else None
    definitions = environment.list_functions(selected)

    for definition in definitions:
        line = f"  {definition.signature}"
        if not definition.pure:
            line += click.style(" (impure)", fg="yellow")
        click.echo(line)
        if definition.description:
            click.echo(f"      {definition.description}")

    click.echo(f"\n{len(definitions)} function(s)")
