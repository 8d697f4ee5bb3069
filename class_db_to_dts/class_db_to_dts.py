import json

import click

from .cli_utils import reconstruct_command_line
from .logging_config import setup_logging
from .pipeline import GenerationError, GeneratorConfig, OutputMode, PipelineGenerator


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--subset", "-s", default=None, type=str, help="Comma separated classes to emit, with their dependencies")
@click.option("--version", "engine_version", default=None, type=str, help="Engine version tag for headers")
@click.option("--force", "-f", is_flag=True, default=False, help="Replace the output directory if it exists")
@click.option("--sort-members", is_flag=True, default=False, help="Sort members by name instead of schema order")
@click.option("--no-docs", is_flag=True, default=False, help="Leave documentation comments out")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
)
@click.argument("source", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def class_db_to_dts(config, subset, engine_version, force, sort_members, no_docs, log_level, source, output):
    """Generate TypeScript declarations from SOURCE into the OUTPUT directory.

    SOURCE is a directory of class documentation XML files or an
    extension_api.json file.
    """
    setup_logging(log_level)

    if config is not None:
        with open(config) as f:
            try:
                config = GeneratorConfig.from_dict(json.load(f))
            except (json.JSONDecodeError, TypeError, ValueError) as e:
                raise click.ClickException(f"Invalid config file {config}: {e}") from e
    else:
        config = GeneratorConfig()

    # CLI flags override the config file
    if subset:
        config.only_classes = [name.strip() for name in subset.split(",") if name.strip()]
    if engine_version:
        config.version = engine_version
    if force:
        config.output.mode = OutputMode.FORCE
    if sort_members:
        config.sort_members = True
    if no_docs:
        config.emit_docs = False

    command_line = reconstruct_command_line(class_db_to_dts)
    codegen = PipelineGenerator(source, config, command_line=command_line)

    try:
        file_set = codegen.write(output)
    except GenerationError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Wrote {len(file_set)} files to {output}")
