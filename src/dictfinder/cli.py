"""Command line interface for DictFinder."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from dictfinder.config import DEFAULT_PORT, DEFAULT_SETTINGS_PATH, AppConfig
from dictfinder.engine import Engine
from dictfinder.errors import DictionaryError
from dictfinder.index.dictionary import load_dictionaries, load_dictionary
from dictfinder.index.search import groups_to_json, resolve_definitions
from dictfinder.models import Definition, IndexRecord, MatchGroup
from dictfinder.web.app import app as web_app, configure

console = Console()
app = typer.Typer(help="DictFinder - fuzzy lookup in local StarDict dictionaries")

EXIT_WORD = "z"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_config(
    paths: Optional[List[Path]],
    settings: Path,
    algorithm: Optional[str] = None,
    depth: Optional[int] = None,
    morpher: Optional[str] = None,
    timelog: bool = False,
    timelog_file: Path = Path("timelog.jsonl"),
) -> AppConfig:
    explicit = set()
    config = AppConfig(settings_path=settings, timelog=timelog, timelog_path=timelog_file)
    if paths:
        config.paths = list(paths)
        explicit.add("paths")
    if algorithm is not None:
        config.search_algorithm = algorithm
        explicit.add("search_algorithm")
    if depth is not None:
        config.search_depth = depth
        explicit.add("search_depth")
    if morpher is not None:
        config.morpher = morpher
    return config.apply_settings_file(explicit)


def _print_definition(definition: Definition) -> None:
    console.print(Text(definition.word, style="bold yellow"))
    console.print(definition.text, markup=False, highlight=False)
    console.print()


def _print_groups(groups: List[MatchGroup]) -> None:
    for group in groups:
        definitions = resolve_definitions(group)
        console.print(
            Text(
                f"From dictionary {group.dictionary.bookname} found {len(definitions)} results.",
                style="bold green",
            )
        )
        for definition in definitions:
            _print_definition(definition)


def _list_groups(groups: List[MatchGroup]) -> None:
    entries: List[tuple[MatchGroup, IndexRecord]] = [
        (group, record) for group in groups for record in group.records
    ]
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Dictionary")
    table.add_column("Word")
    for number, (group, record) in enumerate(entries, start=1):
        table.add_row(str(number), group.dictionary.bookname, record.word)
    console.print(table)

    while True:
        try:
            answer = console.input("[green]Enter the number of the word you want to see.[/green] ")
        except EOFError:
            return
        answer = answer.strip()
        if not answer or answer.lower() == EXIT_WORD:
            return
        if not answer.isdigit() or not 1 <= int(answer) <= len(entries):
            console.print("[green]Enter a valid number or enter z to exit.[/green]")
            continue
        group, record = entries[int(answer) - 1]
        try:
            _print_definition(group.dictionary.read_definition(record))
        except DictionaryError as exc:
            console.print(f"[red]Cannot read definition: {exc}[/red]")


@app.command()
def search(
    word: str = typer.Argument(..., help="Word to look up"),
    paths: Optional[List[Path]] = typer.Option(None, "--path", "-p", help="Dictionary directories"),
    group: Optional[str] = typer.Option(None, "--group", "-g", help="Search group from settings"),
    algorithm: Optional[str] = typer.Option(None, "--algorithm", "-a", help="levenshtein or exact"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=0, help="Levenshtein level"),
    morpher: Optional[str] = typer.Option(None, "--morpher", "-m", help="Root expansion: none, en, tr"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON and exit"),
    list_mode: bool = typer.Option(False, "--list", "-l", help="List matching words only"),
    exit_after: bool = typer.Option(False, "--exit", "-x", help="Exit after the first search"),
    timelog: bool = typer.Option(False, "--timelog", help="Record timing events"),
    timelog_file: Path = typer.Option(Path("timelog.jsonl"), "--timelog-file", help="Timing log path"),
    settings: Path = typer.Option(DEFAULT_SETTINGS_PATH, "--settings", help="Settings file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Look up a word, then keep reading words from the prompt."""
    _setup_logging(verbose)
    config = _build_config(paths, settings, algorithm, depth, morpher, timelog, timelog_file)
    engine = Engine(config).load()
    if not engine.dictionaries:
        console.print("[yellow]No dictionaries found in the given paths.[/yellow]")
        return

    if group is not None and group not in engine.groups:
        console.print(f"[yellow]Unknown group {group}, falling back to default paths.[/yellow]")
        group = None

    while True:
        groups = engine.search(word, group)

        if json_output:
            typer.echo(groups_to_json(groups))
            return
        if not groups:
            console.print("[yellow]Found no result![/yellow]")
        elif list_mode:
            _list_groups(groups)
        else:
            _print_groups(groups)

        if exit_after:
            return
        try:
            answer = console.input("[yellow]Enter a word to search or z to exit.[/yellow] ")
        except EOFError:
            return
        word = answer.strip()
        if not word or word.lower() == EXIT_WORD:
            return


@app.command()
def dictionaries(
    paths: Optional[List[Path]] = typer.Option(None, "--path", "-p", help="Dictionary directories"),
    settings: Path = typer.Option(DEFAULT_SETTINGS_PATH, "--settings", help="Settings file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List the dictionaries that can be loaded."""
    _setup_logging(verbose)
    config = _build_config(paths, settings)
    handles = load_dictionaries(config.paths or [])
    if not handles:
        console.print("[yellow]No dictionaries found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Name")
    table.add_column("Words")
    table.add_column("Format")
    table.add_column("Index")
    for number, handle in enumerate(handles, start=1):
        table.add_row(str(number), handle.bookname, str(handle.word_count), handle.format.name, str(handle.idx_path))
    console.print(table)


@app.command()
def random(
    path: Path = typer.Argument(..., help="Dictionary directory or .ifo file"),
    count: int = typer.Option(50, "--count", "-n", min=1, help="Number of words"),
) -> None:
    """Print random single-token headwords as JSON."""
    try:
        handle = load_dictionary(path)
    except DictionaryError as exc:
        raise typer.BadParameter(str(exc)) from exc

    candidates = [record.word for record in handle.records if " " not in record.word]
    if not candidates:
        raise typer.BadParameter(f"Dictionary {handle.bookname} has no single-token words")

    words: List[str] = []
    attempts = 0
    while len(words) < count and attempts < count * 100:
        attempts += 1
        record = handle.random_record()
        if " " not in record.word:
            words.append(record.word)
    typer.echo(json.dumps({"words": words}, ensure_ascii=False))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(DEFAULT_PORT, help="Server port"),
    paths: Optional[List[Path]] = typer.Option(None, "--path", "-p", help="Dictionary directories"),
    settings: Path = typer.Option(DEFAULT_SETTINGS_PATH, "--settings", help="Settings file path"),
) -> None:
    """Serve lookups over HTTP."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    configure(_build_config(paths, settings))
    console.print(f"Starting lookup server on http://{host}:{port}")
    uvicorn.run(web_app, host=host, port=port, reload=False, log_level="info")
