"""CLI interface for strictschema."""

import importlib
import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import BaseModel
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from strictschema.adapters import (
    create,
    describe_model,
    dump_json,
    generate_enum_schema,
    generate_schema,
    generate_schema_string,
)
from strictschema.errors import DecodingError, SchemaDefinitionError, SerializationError
from strictschema.registry import default_registry
from strictschema.requests import (
    ChatRequestMessage,
    build_chat_request,
    build_responses_request,
    to_payload,
)
from strictschema.serializer import dumps
from strictschema.user_config import (
    ApiStyle,
    get_config_path,
    get_default_config_template,
    get_setting,
    load_user_config,
    save_user_config,
)

app = typer.Typer(
    name="strictschema",
    help="Derive structured-output JSON schemas from pydantic models and decode responses.",
    no_args_is_help=True,
)

config_app = typer.Typer(
    name="config",
    help="Manage user-level default preferences.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

TargetArg = Annotated[
    str, typer.Argument(help="Model or enum to use, as 'package.module:ClassName'")
]


def _load_target(target: str) -> Any:
    """Import ``module:attribute`` and return the attribute."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"Expected 'module:ClassName', got '{target}'")

    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Cannot import module '{module_name}': {e}") from e
    except SchemaDefinitionError as e:
        raise _fail(e) from None

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise typer.BadParameter(f"'{module_name}' has no attribute '{attr}'") from None
    logger.debug(f"Loaded target {target}")
    return obj


def _load_model(target: str) -> type[BaseModel]:
    obj = _load_target(target)
    if not (isinstance(obj, type) and issubclass(obj, BaseModel)):
        raise typer.BadParameter(f"'{target}' is not a pydantic model")
    return obj


def _fail(error: Exception) -> typer.Exit:
    rprint(f"[red]Error: {escape(str(error))}[/red]")
    return typer.Exit(1)


@app.command("schema")
def schema_cmd(
    target: TargetArg,
    bare: Annotated[
        bool, typer.Option("--bare", help="Omit the name/strict envelope")
    ] = False,
    indent: Annotated[
        int | None, typer.Option("--indent", "-i", help="Indentation width")
    ] = None,
) -> None:
    """Print the structured-output schema of a model or enum."""
    obj = _load_target(target)
    width = indent if indent is not None else get_setting("indent")

    try:
        if isinstance(obj, type) and issubclass(obj, Enum):
            typer.echo(dumps(generate_enum_schema(obj), indent=width))
        elif isinstance(obj, type) and issubclass(obj, BaseModel):
            if bare:
                typer.echo(dumps(generate_schema(obj)["schema"], indent=width))
            else:
                typer.echo(generate_schema_string(obj, indent=width))
        else:
            raise typer.BadParameter(f"'{target}' is neither a pydantic model nor an Enum")
    except (SchemaDefinitionError, SerializationError) as e:
        raise _fail(e) from None


@app.command("decode")
def decode_cmd(
    target: TargetArg,
    source: Annotated[Path, typer.Argument(help="JSON file to decode ('-' for stdin)")],
) -> None:
    """Decode a JSON document against a model and print the normalized result."""
    model = _load_model(target)
    data = sys.stdin.buffer.read() if str(source) == "-" else _read_bytes(source)

    try:
        instance = create(model, data)
        typer.echo(dump_json(instance, indent=get_setting("indent")))
    except (DecodingError, SchemaDefinitionError, SerializationError) as e:
        raise _fail(e) from None


def _read_bytes(path: Path) -> bytes:
    if not path.is_file():
        rprint(f"[red]Error: File '{path}' does not exist[/red]")
        raise typer.Exit(1)
    return path.read_bytes()


@app.command("request")
def request_cmd(
    target: TargetArg,
    prompt: Annotated[str, typer.Option("--prompt", "-p", help="User message to send")],
    model: Annotated[
        str | None, typer.Option("--model", "-m", help="Model identifier (default from config)")
    ] = None,
    api: Annotated[
        ApiStyle | None, typer.Option("--api", help="Request layout (default from config)")
    ] = None,
    system: Annotated[
        str | None, typer.Option("--system", "-s", help="Optional system message")
    ] = None,
) -> None:
    """Print a request body asking for output that matches a model's schema."""
    schema_model = _load_model(target)
    model_id = model or get_setting("default_model")
    style = api or ApiStyle(get_setting("api"))

    messages: list[ChatRequestMessage] = []
    if system:
        messages.append(ChatRequestMessage(role="system", content=system))
    messages.append(ChatRequestMessage(role="user", content=prompt))

    try:
        descriptor = describe_model(schema_model)
        match style:
            case ApiStyle.CHAT:
                request = build_chat_request(descriptor, model_id, messages)
            case _:
                request = build_responses_request(descriptor, model_id, messages)
        typer.echo(dumps(to_payload(request), indent=get_setting("indent")))
    except (SchemaDefinitionError, SerializationError) as e:
        raise _fail(e) from None


@app.command("list")
def list_cmd(
    module: Annotated[str, typer.Argument(help="Module whose import registers schemas")],
) -> None:
    """List the schemas registered by importing a module."""
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    try:
        importlib.import_module(module)
    except SchemaDefinitionError as e:
        raise _fail(e) from None
    except ImportError as e:
        rprint(f"[red]Error: Cannot import module '{escape(module)}': {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    if not len(default_registry):
        rprint("[yellow]No schemas registered.[/yellow]")
        return

    table = Table(title="Registered Schemas")
    table.add_column("Name", style="cyan")
    table.add_column("Class")
    table.add_column("Strict", style="green")
    table.add_column("Fields")

    for descriptor in default_registry:
        source = default_registry.source(descriptor.schema_name)
        table.add_row(
            descriptor.schema_name,
            source.__qualname__ if source is not None else "-",
            "yes" if descriptor.strict else "no",
            ", ".join(descriptor.field_names()),
        )

    console.print(table)


@config_app.command("show")
def config_show_cmd() -> None:
    """Show current user configuration."""
    config_path = get_config_path()
    user_cfg = load_user_config()

    if not user_cfg:
        rprint(f"[yellow]No user config found at {config_path}[/yellow]")
        rprint("[dim]Run 'strictschema config init' to create one.[/dim]")
        return

    rprint(f"[cyan]Config file:[/cyan] {config_path}\n")
    table = Table(title="User Defaults")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key, value in user_cfg.items():
        table.add_row(key, str(value))

    console.print(table)


@config_app.command("init")
def config_init_cmd(
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite existing config")] = False,
) -> None:
    """Create a default user configuration file."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        rprint(f"[yellow]Config already exists at {config_path}[/yellow]")
        rprint("[dim]Use --force to overwrite.[/dim]")
        raise typer.Exit(1)

    template = get_default_config_template()
    saved_path = save_user_config(template)
    rprint(f"[green]Created default config at {saved_path}[/green]")


@config_app.command("path")
def config_path_cmd() -> None:
    """Print the path to the user config file."""
    typer.echo(str(get_config_path()))


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
