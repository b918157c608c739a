import json
import logging
from pathlib import Path

import click

from . import generate
from .config import CodeGeneratorConfig, OutputMode
from .errors import CodegenError
from .languages import LANGUAGES
from .model import GenerationConfig
from .writer import write_outputs


@click.command()
@click.option("--target", "-t", default=None, type=click.Choice(sorted(LANGUAGES)), help="Target language [default: go]")
@click.option("--package-name", "-p", default=None, type=str, help="Go package / C# namespace of the generated files")
@click.option("--settings", "-s", default=None, type=click.Path(exists=True, resolve_path=True), help="JSON generator settings")
@click.option("--no-format", is_flag=True, default=False, help="Skip formatting the generated files")
@click.option("--force", is_flag=True, default=False, help="Overwrite existing files")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("config", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output_dir", type=click.Path(file_okay=False, resolve_path=True))
def operations_codegen(target, package_name, settings, no_format, force, verbose, config, output_dir):
    """Generate models and a client for the operations described in CONFIG."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    with open(config) as f:
        generation_config = GenerationConfig.from_dict(json.load(f))

    if settings is not None:
        with open(settings) as f:
            codegen_config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        codegen_config = CodeGeneratorConfig()

    # CLI flags override the settings file
    if target is not None:
        codegen_config.target = target
    if package_name is not None:
        codegen_config.package_name = package_name
    if no_format:
        codegen_config.formatter.enabled = False
    if force:
        codegen_config.output.mode = OutputMode.FORCE

    try:
        files = generate(generation_config, codegen_config)
        written = write_outputs(files, Path(output_dir), codegen_config.output)
    except (CodegenError, FileExistsError) as e:
        raise click.ClickException(str(e)) from e

    for path in written:
        click.echo(str(path))
