"""
bootform CLI - render forms from the command line.

Usage:
    bootform render myapp.forms:SignupForm --prior-group Account
    bootform templates
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

import click

from .bootstrap import bootstrap
from .config import RendererConfig
from .controls import Form
from .core import BootformError
from .forms import BaseForm
from .renderer import FormRenderer


def load_form(target: str, action: str = "", method: str = "post") -> Form:
    """Resolve ``module:attribute`` to a Form."""
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter(f"expected 'module:attribute', got '{target}'")

    if "" not in sys.path:
        sys.path.insert(0, "")
    module = importlib.import_module(module_name)
    try:
        obj = getattr(module, attribute)
    except AttributeError:
        raise click.BadParameter(f"module '{module_name}' has no attribute '{attribute}'")

    if isinstance(obj, type) and issubclass(obj, BaseForm):
        return obj.to_form(action=action, method=method)
    if callable(obj) and not isinstance(obj, Form):
        obj = obj()
    if not isinstance(obj, Form):
        raise click.BadParameter(f"'{target}' is not a Form, a BaseForm or a Form factory")
    return obj


@click.group()
@click.version_option(package_name="bootform")
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline steps to stderr")
def cli(verbose: bool):
    """bootform - render forms as Bootstrap markup."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.argument("target")
@click.option("--action", default="", help="Form action (BaseForm targets only)")
@click.option("--method", default="post", help="Form method (BaseForm targets only)")
@click.option("--prior-group", "prior_groups", multiple=True, help="Group rendered first, repeatable")
@click.option("--errors-at-form", is_flag=True, help="Echo field errors in the form error list")
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Where to look for pyproject.toml [tool.bootform]",
)
def render(
    target: str,
    action: str,
    method: str,
    prior_groups: tuple[str, ...],
    errors_at_form: bool,
    project_root: Path,
):
    """Render the form named by TARGET (module:attribute) to stdout."""
    config = RendererConfig.load(project_root)
    if prior_groups:
        config.prior_groups = list(prior_groups)
    if errors_at_form:
        config.errors_at_inputs = False

    form = load_form(target, action=action, method=method)
    renderer = FormRenderer.from_config(config)
    try:
        renderer.render(form)
    except BootformError as exc:
        raise click.ClickException(str(exc))
    click.echo()


@cli.command()
def templates():
    """List the bundled template names."""
    for name in bootstrap.names():
        click.echo(name)


def main():
    cli()


if __name__ == "__main__":
    main()
