# viewkit/cli/interface.py
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
from rich.table import Table

from viewkit import __version__ as app_version
from viewkit.config.loader import config_from_mapping, load_and_merge_configs
from viewkit.config.settings import BackendKind, EngineConfig
from viewkit.core.engine import Engine
from viewkit.exceptions import ViewKitError
from viewkit.logging_setup import configure_logging, get_logger

log = get_logger(__name__)

def _engine_options(cmd):
    # source and compile options shared by every subcommand.
    cmd = optgroup.option("--exclude", "exclude_patterns", multiple=True, help="Gitignore-style pattern of template files to skip. Repeatable.")(cmd)
    cmd = optgroup.option("--delims", "delims", nargs=2, metavar="LEFT RIGHT", default=None, help="Override the template delimiters.")(cmd)
    cmd = optgroup.option("-b", "--backend", "backend", type=click.Choice([b.value for b in BackendKind]), default=None, help="Template language. Default: chosen from the extension.")(cmd)
    cmd = optgroup.option("-e", "--ext", "extension", default=None, help="Template file extension. Default: .html")(cmd)
    cmd = optgroup.option("-d", "--dir", "directory", type=click.Path(file_okay=False, path_type=Path), default=None, help="Template directory. Default: ./views")(cmd)
    cmd = optgroup.group("Template Source", help="Where templates come from and how they compile.")(cmd)
    return cmd

def _build_engine(cli_params: Dict[str, Any], debug: bool = False) -> Engine:
    # toml config first, then explicit cli values on top.
    effective: Dict[str, Any] = dict(load_and_merge_configs())
    for key in ("directory", "extension", "backend", "delims"):
        if cli_params.get(key):
            effective[key] = cli_params[key]
    if cli_params.get("exclude_patterns"):
        effective["exclude_patterns"] = list(cli_params["exclude_patterns"])
    if debug:
        effective["debug"] = True
    config: EngineConfig = config_from_mapping(effective)
    log.debug("cli_engine_config_resolved", directory=str(config.directory), extension=config.extension, backend=config.resolved_backend.value)
    return Engine.from_config(config)

def _parse_render_data(data_file: Optional[Path], variables: Tuple[str, ...]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if data_file is not None:
        try:
            loaded = json.loads(data_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise click.BadParameter(f"could not read JSON data from {data_file}: {e}", param_hint="--data")
        if not isinstance(loaded, dict):
            raise click.BadParameter("JSON data must be an object", param_hint="--data")
        data.update(loaded)
    for item in variables:
        if "=" not in item:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--var")
        key, value = item.split("=", 1)
        data[key.strip()] = value
    return data

def _run(action):
    try:
        return action()
    except click.exceptions.Exit:
        raise
    except ViewKitError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

@click.group()
@click.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="viewkit", prog_name="viewkit", help="Show version and exit.")
@click.help_option("-h", "--help", help="Show this message and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, verbosity_level: int, force_json_logs: bool):
    """viewkit: compile a directory of view templates and render them,
    optionally inside a layout."""
    log_level = "warning"
    if verbosity_level == 1: log_level = "info"
    elif verbosity_level >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=force_json_logs)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = verbosity_level >= 2

@main_cli_group.command("render")
@click.argument("name")
@_engine_options
@optgroup.group("Render Input & Output", help="Data passed to the template and where output goes.")
@optgroup.option("-l", "--layout", "layout", default=None, help="Layout template to wrap the output in.")
@optgroup.option("-D", "--data", "data_file", type=click.Path(dir_okay=False, exists=True, path_type=Path), default=None, help="JSON file with the render data (an object).")
@optgroup.option("--var", "variables", multiple=True, metavar="KEY=VALUE", help="Extra render variable. Repeatable; overrides --data.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Write output to this file instead of stdout.")
@click.pass_context
def render_command(ctx: click.Context, name: str, layout: Optional[str], data_file: Optional[Path], variables: Tuple[str, ...], output_file: Optional[Path], **cli_params: Any):
    """Render template NAME (a logical name such as 'errors/404')."""
    def action():
        engine = _build_engine(cli_params, debug=ctx.obj.get("debug", False))
        data = _parse_render_data(data_file, variables)
        rendered = engine.render_to_string(name, data, layout)
        if output_file is not None:
            log.info("writing_output_to_file", path=str(output_file))
            try:
                output_file.write_text(rendered, encoding="utf-8")
            except OSError as e:
                raise click.ClickException(f"failed to write to file '{output_file}': {e}")
        else:
            click.echo(rendered, nl=False)
    _run(action)

@main_cli_group.command("list")
@_engine_options
@click.pass_context
def list_command(ctx: click.Context, **cli_params: Any):
    """Compile the templates and list their logical names."""
    def action():
        engine = _build_engine(cli_params, debug=ctx.obj.get("debug", False))
        registry = engine.load()
        table = Table(title=f"templates ({engine.backend.name})")
        table.add_column("name")
        table.add_column("source file")
        table.add_column("defined in")
        for template_name in registry.names():
            entry = registry.lookup(template_name)
            table.add_row(template_name, entry.path or "", entry.parent or "")
        RichConsole(width=200).print(table)
    _run(action)
