"""Typer-based CLI application for hostlabels."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from pydantic import ValidationError

from hostlabels import __version__
from hostlabels.config import Settings, load_settings
from hostlabels.core.codec import format_labels, parse_labels, write_labels
from hostlabels.core.exceptions import LabelError
from hostlabels.core.expansion import TemplateExpander
from hostlabels.core.labels import Label, LabelStore

app = typer.Typer(
    name="hostlabels",
    help="Host metadata labels with live system fact expansion",
    add_completion=False,
)

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


LogLevelOption = Annotated[
    str,
    typer.Option(
        help="Logging level (debug, info, warn, error)",
        case_sensitive=False,
        hidden=True,
    ),
]

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", help="Settings file (YAML)"),
]

LabelFileArgument = Annotated[Path, typer.Argument(help="Label file")]


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        typer.echo(f"hostlabels v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
):
    """Hostlabels - manage a host's metadata labels.

    Labels are key/value pairs stored one per line. Values may embed
    placeholders such as $(hostname) or $(ipv4.primary), which are
    expanded from live system facts when labels are shown.
    """
    pass


def configure_logging(log_level: str) -> None:
    """Configure logging from a --log-level value.

    Raises:
        typer.Exit: If the level is not recognised
    """
    log_level_upper = log_level.upper()
    if log_level_upper not in ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]:
        typer.echo(
            f"❌ Invalid log level: {log_level}. "
            "Must be debug, info, warn, or error.",
            err=True,
        )
        raise typer.Exit(1)

    # Map WARN to WARNING for Python logging
    if log_level_upper == "WARN":
        log_level_upper = "WARNING"

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(message)s",
    )


def _load_settings(config: Optional[Path]) -> Settings:
    try:
        return load_settings(config)
    except LabelError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e


def _load_store(label_file: Path) -> Optional[LabelStore]:
    try:
        return parse_labels(label_file)
    except LabelError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def show(
    label_file: LabelFileArgument,
    capacity: Annotated[
        Optional[int],
        typer.Option(min=1, help="Output capacity in characters"),
    ] = None,
    config: ConfigOption = None,
    log_level: LogLevelOption = "warn",
):
    """Render labels with placeholders expanded."""
    configure_logging(log_level)
    settings = _load_settings(config)

    store = _load_store(label_file)
    if store is None:
        typer.echo(f"No label file: {label_file}", err=True)
        return

    expander = TemplateExpander(
        settings.build_provider(), settings.expansion_max_length
    )
    try:
        text = format_labels(
            store,
            capacity=capacity or settings.output_capacity,
            expander=expander,
        )
    except LabelError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(text, nl=False)


@app.command()
def get(
    label_file: LabelFileArgument,
    key: Annotated[str, typer.Argument(help="Label key")],
    log_level: LogLevelOption = "warn",
):
    """Print the raw value of a label (first match)."""
    configure_logging(log_level)

    store = _load_store(label_file)
    value = store.get(key) if store is not None else None
    if value is None:
        typer.echo(f"❌ Label not found: {key}", err=True)
        raise typer.Exit(1)

    typer.echo(value)


@app.command("set")
def set_label(
    label_file: LabelFileArgument,
    key: Annotated[str, typer.Argument(help="Label key")],
    value: Annotated[str, typer.Argument(help="Label value")],
    hidden: Annotated[
        bool, typer.Option("--hidden", help="Mark the label hidden")
    ] = False,
    append: Annotated[
        bool,
        typer.Option("--append", help="Append even if the key already exists"),
    ] = False,
    log_level: LogLevelOption = "warn",
):
    """Add or update a label and write the file back."""
    configure_logging(log_level)

    store = _load_store(label_file)
    if store is None:
        store = LabelStore()

    try:
        store.add(key, value, hidden=hidden, overwrite=not append)
    except ValidationError as e:
        typer.echo(f"❌ Invalid label: {e.errors()[0]['msg']}", err=True)
        raise typer.Exit(1) from e

    try:
        write_labels(store, label_file)
    except LabelError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    logger.info("Saved %d labels to %s", len(store), label_file)


@app.command("list")
def list_labels(
    label_file: LabelFileArgument,
    all_: Annotated[
        bool, typer.Option("--all", help="Include hidden labels")
    ] = False,
    output: Annotated[
        OutputFormat, typer.Option(help="Output format")
    ] = OutputFormat.TEXT,
    log_level: LogLevelOption = "warn",
):
    """List labels with their raw values."""
    configure_logging(log_level)

    store = _load_store(label_file) or LabelStore()
    labels = list(store) if all_ else store.visible()
    selected = LabelStore.from_labels(labels)

    if output == OutputFormat.JSON:
        typer.echo(selected.to_json())
    elif output == OutputFormat.YAML:
        typer.echo(selected.to_yaml(), nl=False)
    else:
        for label in selected:
            suffix = " (hidden)" if label.hidden else ""
            typer.echo(f"{label.key}={label.value}{suffix}")


@app.command()
def expand(
    value: Annotated[str, typer.Argument(help="Value with $(token) placeholders")],
    config: ConfigOption = None,
    log_level: LogLevelOption = "warn",
):
    """Expand placeholders in a single value."""
    configure_logging(log_level)
    settings = _load_settings(config)

    expander = TemplateExpander(
        settings.build_provider(), settings.expansion_max_length
    )
    result = expander.expand(Label(key="value", value=value.replace("\n", " ")))
    typer.echo(result.text)
    if result.truncated:
        raise typer.Exit(1)


@app.command()
def facts(
    output: Annotated[
        OutputFormat, typer.Option(help="Output format (json or yaml)")
    ] = OutputFormat.YAML,
    config: ConfigOption = None,
    log_level: LogLevelOption = "warn",
):
    """Show the system facts available to placeholders."""
    configure_logging(log_level)
    settings = _load_settings(config)
    provider = settings.build_provider()

    data = {
        "os": provider.get_os_info().model_dump(mode="json"),
        "network": provider.list_network_interfaces().model_dump(mode="json"),
        "utc_offset": provider.utc_offset_hours(),
    }

    if output == OutputFormat.JSON:
        typer.echo(json.dumps(data, indent=2))
    else:
        typer.echo(yaml.dump(data, default_flow_style=False, sort_keys=False), nl=False)


if __name__ == "__main__":
    app()
