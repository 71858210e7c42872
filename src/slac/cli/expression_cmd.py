"""Expression CLI commands: eval, compile and check."""

import json
import logging
from pathlib import Path
from typing import Any

import click
import yaml

from slac import compile, run
from slac.config import EngineConfig
from slac.environment import StaticEnvironment
from slac.errors import CompileError, EvaluationError
from slac.optimizer import optimize
from slac.serialize import dumps, value_to_dict
from slac.stdlib import extend_environment
from slac.validator import check_boolean_result, validate

logger = logging.getLogger(__name__)


def _fail(message: str):
    click.echo(click.style(message, fg="red"), err=True)
    raise SystemExit(1)


def _load_variables(assignments: tuple[str, ...], vars_file: Path | None) -> dict[str, Any]:
    """Collect variables from a YAML mapping file and NAME=VALUE options.

    Values are parsed as YAML, so `--var n=3` is a Number and `--var s=abc`
    a String. Options given on the command line override the file.
    """
    variables: dict[str, Any] = {}

    if vars_file is not None:
        try:
            with open(vars_file) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            _fail(f"Error: cannot parse {vars_file}: {e}")
        if data is None:
            data = {}
        if not isinstance(data, dict):
            _fail(f"Error: {vars_file} must contain a mapping of variable names to values")
        variables.update({str(name): value for name, value in data.items()})

    for assignment in assignments:
        name, sep, raw = assignment.partition("=")
        if not sep or not name.strip():
            _fail(f"Error: expected NAME=VALUE, got '{assignment}'")
        try:
            variables[name.strip()] = yaml.safe_load(raw) if raw.strip() else ""
        except yaml.YAMLError as e:
            _fail(f"Error: cannot parse value of '{name.strip()}': {e}")

    return variables


def _environment(variables: dict[str, Any], config: EngineConfig) -> StaticEnvironment:
    """Standard library plus the given variables."""
    environment = extend_environment(StaticEnvironment(), config)
    for name, value in variables.items():
        try:
            environment.add_variable(name, value)
        except TypeError as e:
            _fail(f"Error: invalid value for variable '{name}': {e}")
    logger.debug("Loaded %d variable(s)", len(variables))
    return environment


_var_option = click.option(
    "--var",
    "assignments",
    multiple=True,
    metavar="NAME=VALUE",
    help="Define a variable; the value is parsed as YAML. Repeatable.",
)
_vars_option = click.option(
    "--vars",
    "vars_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with a mapping of variable names to values.",
)


@click.command("eval")
@click.argument("expression")
@_var_option
@_vars_option
@click.option(
    "--optimize/--no-optimize",
    "use_optimizer",
    default=None,
    help="Rewrite if_then calls into lazy conditionals (default: on).",
)
@click.option(
    "--validate/--no-validate",
    "use_validator",
    default=None,
    help="Check variables and functions before evaluating (default: off).",
)
@click.option("--fold", is_flag=True, default=False, help="Fold constant subexpressions.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
def eval_cmd(
    expression: str,
    assignments: tuple[str, ...],
    vars_file: Path | None,
    use_optimizer: bool | None,
    use_validator: bool | None,
    fold: bool,
    as_json: bool,
):
    """Evaluate an EXPRESSION and print the result.

    Defaults come from the SLAC_* environment variables.

        slac eval "max(price, 100) > 149" --var price=150
    """
    config = EngineConfig.from_env()
    if use_optimizer is not None:
        config.optimize = use_optimizer
    if use_validator is not None:
        config.validate = use_validator
    if fold:
        config.fold_constants = True

    environment = _environment(_load_variables(assignments, vars_file), config)

    try:
        result = run(expression, environment, config)
    except (CompileError, EvaluationError) as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(value_to_dict(result)))
    else:
        click.echo(str(result))


@click.command("compile")
@click.argument("expression")
@click.option(
    "--optimize",
    "optimized",
    is_flag=True,
    default=False,
    help="Rewrite if_then calls into conditionals before printing.",
)
@click.option(
    "--fold",
    is_flag=True,
    default=False,
    help="Also fold constants using the standard library.",
)
@click.option("--indent", default=2, show_default=True, help="JSON indentation.")
def compile_cmd(expression: str, optimized: bool, fold: bool, indent: int):
    """Compile an EXPRESSION and print its JSON wire form."""
    try:
        tree = compile(expression)
    except CompileError as e:
        _fail(str(e))

    if fold:
        tree = optimize(tree, extend_environment(StaticEnvironment()))
    elif optimized:
        tree = optimize(tree)

    click.echo(dumps(tree, indent=indent))


@click.command()
@click.argument("expression")
@_var_option
@_vars_option
@click.option(
    "--boolean",
    "require_boolean",
    is_flag=True,
    default=False,
    help="Also require the expression to produce a Boolean.",
)
def check(
    expression: str,
    assignments: tuple[str, ...],
    vars_file: Path | None,
    require_boolean: bool,
):
    """Validate an EXPRESSION against the standard library and variables."""
    environment = _environment(_load_variables(assignments, vars_file), EngineConfig())

    try:
        tree = compile(expression)
    except CompileError as e:
        _fail(str(e))

    result = validate(environment, tree)
    if not result.is_valid:
        _fail(f"Invalid: {result.message}")

    if require_boolean and not check_boolean_result(tree):
        _fail("Invalid: expression does not produce a Boolean")

    click.echo(click.style("Expression is valid.", fg="green", bold=True))
