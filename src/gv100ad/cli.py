"""Command-line interface for GV100AD files."""

import dataclasses
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from gv100ad.config.settings import ParserConfig
    from gv100ad.database import Database
    from gv100ad.errors import Gv100adError
    from gv100ad.model.kinds import Kind
    from gv100ad.model.records import Record

app = typer.Typer(
    name="gv100ad",
    help="Query the German municipality directory (GV100AD).",
    no_args_is_help=True,
)

console = Console()

FileOption = Annotated[
    Path | None,
    typer.Option(
        "--file",
        "-f",
        help="Path to the GV100AD text file (overrides the configured dataset).",
        dir_okay=False,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]
LenientOption = Annotated[
    bool,
    typer.Option("--lenient", help="Skip malformed lines instead of failing."),
]
EncodingOption = Annotated[
    str | None,
    typer.Option("--encoding", "-e", help="File encoding (default: utf-8)."),
]


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level for messages on stderr."),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Render log messages as JSON."),
    ] = False,
) -> None:
    """Query the German municipality directory (GV100AD)."""
    from gv100ad.utils.logging import configure_logging

    configure_logging(level=log_level, json_output=json_logs)


def _parser_config(
    config: Path | None,
    lenient: bool,
    encoding: str | None,
) -> tuple["ParserConfig", Path | None]:
    from gv100ad.config.loader import load_config
    from gv100ad.config.settings import ParserConfig

    if config is None:
        parser_config = ParserConfig()
        dataset = None
    else:
        console.print(f"[blue]Loading configuration from {config}[/blue]", highlight=False)
        loaded = load_config(config)
        parser_config = loaded.parser
        dataset = loaded.dataset_path if loaded.data_paths.dataset is not None else None

    updates: dict[str, object] = {}
    if lenient:
        updates["lenient"] = True
    if encoding is not None:
        updates["encoding"] = encoding
    if updates:
        parser_config = ParserConfig(**{**parser_config.model_dump(), **updates})
    return parser_config, dataset


def _load_database(
    file: Path | None,
    config: Path | None,
    lenient: bool = False,
    encoding: str | None = None,
) -> "Database":
    from gv100ad.database import Database
    from gv100ad.errors import ConstructionError

    try:
        parser_config, dataset = _parser_config(config, lenient, encoding)
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    path = file or dataset
    if path is None:
        console.print("[red]Error: No dataset given. Use --file or set data.dataset.[/red]")
        raise typer.Exit(code=1)

    try:
        return Database.from_path(path, parser_config)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e
    except ConstructionError as e:
        _print_errors(e.errors)
        raise typer.Exit(code=1) from e


def _print_errors(errors: list["Gv100adError"]) -> None:
    from gv100ad.errors import DuplicateKeyError, LineParseError

    table = Table(title=f"Errors ({len(errors)})")
    table.add_column("Line", style="cyan", justify="right")
    table.add_column("Field", style="magenta")
    table.add_column("Reason", style="red")

    for error in errors:
        if isinstance(error, LineParseError):
            table.add_row(str(error.line_number), error.field, error.reason)
        elif isinstance(error, DuplicateKeyError):
            table.add_row(
                str(error.line_number),
                "key",
                f"duplicate {error.kind.value} {error.key}, first on line {error.first_line_number}",
            )
        else:
            table.add_row("", "", str(error))
    console.print(table)


def _kind(value: str) -> "Kind":
    from gv100ad.model.kinds import Kind

    try:
        return Kind.from_string(value)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e


def _infer_kind(key: str) -> "Kind":
    from gv100ad.model.kinds import HIERARCHY

    for kind in HIERARCHY:
        if len(key) == kind.key_length:
            return kind
    console.print(f"[red]Error: Cannot infer kind of key {key!r}. Use --kind.[/red]")
    raise typer.Exit(code=1)


def _label(db: "Database", record: "Record") -> str:
    label = f"[cyan]{record.key}[/cyan] {escape(record.name)} [dim]({record.kind.value})[/dim]"
    population = _population(db, record)
    if population is not None:
        label += f" [green]{population:,}[/green]"
    return label


def _population(db: "Database", record: "Record") -> int | None:
    from gv100ad.model.keys import can_contain
    from gv100ad.model.kinds import Kind
    from gv100ad.model.records import Gemeinde, Verband

    if isinstance(record, Gemeinde):
        return record.population_total
    if isinstance(record, Verband):
        gemeinden = db.members(record.key)
    elif can_contain(record.kind, Kind.GEMEINDE):
        gemeinden = db.children(record.kind, record.key, of=Kind.GEMEINDE)
    else:
        return None
    values = [g.population_total for g in gemeinden if g.population_total is not None]  # type: ignore[attr-defined]
    return sum(values) if values else None


def _add_subtree(tree: Tree, db: "Database", record: "Record", depth: int | None) -> None:
    if depth == 0:
        return
    for child in db.children(record.kind, record.key):
        branch = tree.add(_label(db, child))
        _add_subtree(branch, db, child, None if depth is None else depth - 1)


@app.command()
def show(
    key: Annotated[str, typer.Argument(help="Key of the record to show, e.g. 10 or 10041.")],
    file: FileOption = None,
    config: ConfigOption = None,
    kind: Annotated[
        str | None,
        typer.Option("--kind", "-k", help="Kind of the key (inferred from its length)."),
    ] = None,
    depth: Annotated[
        int | None,
        typer.Option("--depth", "-d", help="Maximum number of levels below the key."),
    ] = None,
    lenient: LenientOption = False,
    encoding: EncodingOption = None,
) -> None:
    """Show a record and its descendants as a tree, with populations."""
    from gv100ad.errors import Gv100adError

    record_kind = _kind(kind) if kind is not None else _infer_kind(key)
    db = _load_database(file, config, lenient, encoding)

    try:
        record = db.get(record_kind, key)
    except Gv100adError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    tree = Tree(_label(db, record))
    _add_subtree(tree, db, record, depth)
    console.print(tree)


@app.command()
def get(
    kind: Annotated[str, typer.Argument(help="Kind, e.g. Land, Kreis, Gemeinde.")],
    key: Annotated[str, typer.Argument(help="Key of the record.")],
    file: FileOption = None,
    config: ConfigOption = None,
    lenient: LenientOption = False,
    encoding: EncodingOption = None,
) -> None:
    """Show all fields of one record."""
    from gv100ad.errors import Gv100adError

    record_kind = _kind(kind)
    db = _load_database(file, config, lenient, encoding)

    try:
        record = db.get(record_kind, key)
    except Gv100adError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"{record.kind.value} {record.key}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    for field in dataclasses.fields(record):
        value = getattr(record, field.name)
        table.add_row(field.name, "" if value is None else str(value))
    for name in ("classification", "population_female", "ars"):
        if hasattr(record, name):
            value = getattr(record, name)
            table.add_row(name, "" if value is None else str(value))

    console.print(table)


@app.command()
def children(
    kind: Annotated[str, typer.Argument(help="Kind of the parent record.")],
    key: Annotated[str, typer.Argument(help="Key of the parent record.")],
    of: Annotated[
        str | None,
        typer.Option("--of", help="List all contained records of this kind instead."),
    ] = None,
    file: FileOption = None,
    config: ConfigOption = None,
    lenient: LenientOption = False,
    encoding: EncodingOption = None,
) -> None:
    """List the children of a record."""
    from gv100ad.errors import Gv100adError

    parent_kind = _kind(kind)
    child_kind = _kind(of) if of is not None else None
    db = _load_database(file, config, lenient, encoding)

    try:
        records = db.children(parent_kind, key, of=child_kind)
    except (Gv100adError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Children of {parent_kind.value} {key} ({len(records)})")
    table.add_column("Key", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Name")
    table.add_column("Population", style="green", justify="right")

    for record in records:
        population = _population(db, record)
        table.add_row(
            str(record.key),
            record.kind.value,
            escape(record.name),
            f"{population:,}" if population is not None else "",
        )
    console.print(table)


@app.command()
def validate(
    file: FileOption = None,
    config: ConfigOption = None,
    encoding: EncodingOption = None,
) -> None:
    """Parse a file and report every malformed line."""
    from gv100ad.config.settings import ParserConfig
    from gv100ad.database import Database
    from gv100ad.errors import ConstructionError
    from gv100ad.model.kinds import Kind

    try:
        parser_config, dataset = _parser_config(config, lenient=False, encoding=encoding)
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    path = file or dataset
    if path is None:
        console.print("[red]Error: No dataset given. Use --file or set data.dataset.[/red]")
        raise typer.Exit(code=1)

    parser_config = ParserConfig(
        **{**parser_config.model_dump(), "lenient": False, "collect_all_errors": True}
    )

    try:
        db = Database.from_path(path, parser_config)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e
    except ConstructionError as e:
        _print_errors(e.errors)
        console.print(f"[red]✗ {path.name} is invalid[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Records in {path.name}")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", style="green", justify="right")
    for kind in Kind:
        table.add_row(kind.value, str(db.count(kind)))
    table.add_row("Total", str(len(db)), style="bold")
    console.print(table)
    console.print(f"[green]✓ {path.name} is valid[/green]")


@app.command()
def export(
    kind: Annotated[str, typer.Argument(help="Kind of records to export.")],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output path for the CSV file.", dir_okay=False),
    ],
    file: FileOption = None,
    config: ConfigOption = None,
    lenient: LenientOption = False,
    encoding: EncodingOption = None,
) -> None:
    """Export all records of one kind as CSV."""
    from pandera.errors import SchemaError

    from gv100ad.export import write_csv

    record_kind = _kind(kind)
    db = _load_database(file, config, lenient, encoding)

    try:
        path = write_csv(db, record_kind, output)
    except SchemaError as e:
        console.print(f"[red]Export failed schema validation: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(
        f"[green]Saved {db.count(record_kind)} {record_kind.value} records to: {path}[/green]"
    )


@app.command()
def version() -> None:
    """Show version information."""
    from gv100ad import __version__

    console.print(f"gv100ad version {__version__}")


if __name__ == "__main__":
    app()
