"""CLI entry point for http-to-postman."""

from pathlib import Path

import click

from http_to_postman.converter import CollectionConverter
from http_to_postman.environment import DEFAULT_ENV_NAME, ENV_FILENAME
from http_to_postman.errors import ConversionError


@click.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--env", "env_name", default=DEFAULT_ENV_NAME, show_default=True, help="Environment used to resolve variables.")
@click.option("--env-file", type=click.Path(dir_okay=False, path_type=Path), default=None, help=f"Environment file (default: {ENV_FILENAME} beside the input).")
@click.option("--legacy", is_flag=True, help="Plain request/header/body grammar without annotations or scripts.")
@click.option("--substitute-vars", is_flag=True, help="Resolve {{variables}} in header values.")
@click.option("-v", "--verbose", is_flag=True, help="Report skipped lines.")
def main(input_path: Path, output_path: Path, env_name: str, env_file: Path | None, legacy: bool, substitute_vars: bool, verbose: bool):
    """Convert a JetBrains .http request file into a Postman collection."""
    click.echo(f"Parsing {input_path}...")
    converter = CollectionConverter(
        env_name=env_name,
        env_file=env_file,
        legacy=legacy,
        substitute_variables=substitute_vars,
    )
    try:
        result = converter.convert_file(input_path, output_path)
    except ConversionError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        for warning in result.warnings:
            click.echo(f"  warning: {warning}", err=True)

    click.echo(f"Found {result.request_count} requests, {len(result.variables)} variables.")
    click.echo(f"Successfully converted {input_path} to {output_path}")
