"""Command line interface for entrytitles."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .cache import clear_titles, load_title_metadata
from .config import load_config, resolve_state_dir, resolve_titles_cachefile
from .services.cache_service import load_cache
from .services.config_service import apply_config_updates, get_config_snapshot
from .services.index_service import (
    IndexStatus,
    ReindexDirective,
    index_titles,
)
from .text import Messages, Styles
from .utils import build_file_index, resolve_directory

console = Console()

app = typer.Typer(
    help=Messages.APP_HELP,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

_VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"entrytitles v{__version__}")
        raise typer.Exit()


def _configure_logging(verbosity: int) -> None:
    level = _VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
    )


def _parse_boolean(value: str) -> bool:
    token = value.strip().lower()
    if token in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if token in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(Messages.ERROR_BOOLEAN_INVALID.format(value=value))


def _styled(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]"


def _escape_porcelain_field(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace("\t", "\\t")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help=Messages.HELP_VERSION,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help=Messages.HELP_VERBOSE,
    ),
) -> None:
    """Global Typer callback for shared options."""
    _configure_logging(verbose)


@app.command()
def index(
    path: Path = typer.Option(
        Path.cwd(),
        "--path",
        "-p",
        help=Messages.HELP_INDEX_PATH,
    ),
    include_hidden: bool = typer.Option(
        False,
        "--include-hidden",
        "-i",
        help=Messages.HELP_INDEX_INCLUDE,
    ),
    no_respect_gitignore: bool = typer.Option(
        False,
        "--no-respect-gitignore",
        help=Messages.HELP_RESPECT_GITIGNORE,
    ),
    reindex_all: bool = typer.Option(
        False,
        "--reindex-all",
        help=Messages.HELP_REINDEX_ALL,
    ),
    reindex: bool = typer.Option(
        False,
        "--reindex",
        help=Messages.HELP_REINDEX,
    ),
    reindex_cat: str | None = typer.Option(
        None,
        "--reindex-cat",
        help=Messages.HELP_REINDEX_CAT,
    ),
    delindex: bool = typer.Option(
        False,
        "--delindex",
        help=Messages.HELP_DELINDEX,
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help=Messages.HELP_NO_CACHE,
    ),
) -> None:
    """Create or refresh the title cache for the entries under a data directory."""
    config = load_config()
    if no_cache:
        config.use_caching = False
    try:
        directory = resolve_directory(path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    file_index = build_file_index(
        directory,
        config.file_extensions,
        include_hidden=include_hidden,
        respect_gitignore=not no_respect_gitignore,
    )
    if not file_index.files:
        console.print(_styled(Messages.INFO_NO_FILES, Styles.WARNING))
    directive = ReindexDirective.from_params(
        {
            "reindex_all": reindex_all,
            "reindex": reindex,
            "reindex_cat": reindex_cat,
            "delindex": delindex,
        }
    )
    if directive.category and not directive.reindex_all and not file_index.has_category(
        directive.category
    ):
        console.print(
            _styled(
                Messages.ERROR_REINDEX_CAT_MISSING.format(category=escape(directive.category)),
                Styles.WARNING,
            )
        )

    console.print(_styled(Messages.INFO_INDEX_RUNNING.format(path=directory), Styles.INFO))
    run_state = index_titles(file_index, directive, config=config)
    result = run_state.result
    console.print(
        _styled(
            Messages.INFO_INDEX_SUMMARY.format(
                mode=result.mode.value.capitalize(),
                entries=result.entries,
                changed=len(result.mutated),
            ),
            Styles.INFO,
        )
    )
    if result.status == IndexStatus.STORED and result.cache_path is not None:
        console.print(
            _styled(Messages.INFO_INDEX_SAVED.format(path=result.cache_path), Styles.SUCCESS)
        )
    elif result.status == IndexStatus.UNSAVED:
        console.print(
            _styled(
                Messages.WARNING_INDEX_NOT_SAVED.format(reason=escape(result.save_error or "")),
                Styles.WARNING,
            )
        )
    elif result.status == IndexStatus.MEMORY_ONLY:
        console.print(_styled(Messages.INFO_CACHING_DISABLED, Styles.INFO))
    else:
        console.print(_styled(Messages.INFO_INDEX_UNCHANGED, Styles.INFO))


@app.command()
def show(
    porcelain: bool = typer.Option(
        False,
        "--porcelain",
        help=Messages.HELP_SHOW_PORCELAIN,
    ),
) -> None:
    """List the titles held in the title cache."""
    cachefile = resolve_titles_cachefile(load_config())
    titles = load_cache(cachefile, enabled=True)
    if not titles:
        if not porcelain:
            console.print(_styled(Messages.INFO_CACHE_EMPTY.format(path=cachefile), Styles.INFO))
        return
    ordered = sorted(titles.items())
    if porcelain:
        for file_id, title in ordered:
            sys.stdout.write(
                f"{_escape_porcelain_field(file_id)}\t{_escape_porcelain_field(title)}\n"
            )
        return

    table = Table(title=Messages.TABLE_TITLE, header_style=Styles.TABLE_HEADER)
    table.add_column(Messages.TABLE_HEADER_FILE_ID, overflow="fold")
    table.add_column(Messages.TABLE_HEADER_TITLE, overflow="fold")
    for file_id, title in ordered:
        table.add_row(escape(file_id), escape(title))
    console.print(table)
    metadata = load_title_metadata(cachefile)
    if metadata is not None:
        console.print(
            _styled(f"{cachefile} ({metadata['generated_at']})", Styles.INFO)
        )


@app.command()
def clear() -> None:
    """Remove the title cache store."""
    cachefile = resolve_titles_cachefile(load_config())
    if not cachefile.exists():
        console.print(_styled(Messages.INFO_CACHE_CLEAR_NONE.format(path=cachefile), Styles.INFO))
        return
    removed = clear_titles(cachefile)
    console.print(
        _styled(
            Messages.INFO_CACHE_CLEARED.format(
                count=removed,
                plural="" if removed == 1 else "s",
                path=cachefile,
            ),
            Styles.SUCCESS,
        )
    )


@app.command()
def config(
    set_use_caching_option: str | None = typer.Option(
        None,
        "--set-use-caching",
        help=Messages.HELP_SET_USE_CACHING,
    ),
    set_state_dir_option: str | None = typer.Option(
        None,
        "--set-state-dir",
        help=Messages.HELP_SET_STATE_DIR,
    ),
    set_titles_cachefile_option: str | None = typer.Option(
        None,
        "--set-titles-cachefile",
        help=Messages.HELP_SET_CACHEFILE,
    ),
    clear_titles_cachefile: bool = typer.Option(
        False,
        "--clear-titles-cachefile",
        help=Messages.HELP_CLEAR_CACHEFILE,
    ),
    show_config: bool = typer.Option(
        False,
        "--show",
        help=Messages.HELP_SHOW_CONFIG,
    ),
) -> None:
    """Manage entrytitles configuration stored in ~/.entrytitles/config.json."""
    use_caching: bool | None = None
    if set_use_caching_option is not None:
        try:
            use_caching = _parse_boolean(set_use_caching_option)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc

    updates = apply_config_updates(
        use_caching=use_caching,
        state_dir=set_state_dir_option,
        titles_cachefile=set_titles_cachefile_option,
        clear_titles_cachefile=clear_titles_cachefile,
    )
    if updates.use_caching_set:
        console.print(
            _styled(
                Messages.INFO_USE_CACHING_SET.format(value="on" if use_caching else "off"),
                Styles.SUCCESS,
            )
        )
    if updates.state_dir_set:
        console.print(
            _styled(Messages.INFO_STATE_DIR_SET.format(value=set_state_dir_option), Styles.SUCCESS)
        )
    if updates.titles_cachefile_set:
        console.print(
            _styled(
                Messages.INFO_CACHEFILE_SET.format(value=set_titles_cachefile_option),
                Styles.SUCCESS,
            )
        )
    if updates.titles_cachefile_cleared:
        console.print(_styled(Messages.INFO_CACHEFILE_CLEARED, Styles.SUCCESS))

    if show_config or not updates.changed:
        snapshot = get_config_snapshot()
        extensions = ", ".join(
            f"{ext}={fmt}" for ext, fmt in sorted(snapshot.file_extensions.items())
        )
        console.print(
            _styled(
                Messages.INFO_CONFIG_SUMMARY.format(
                    caching="on" if snapshot.use_caching else "off",
                    state_dir=resolve_state_dir(snapshot),
                    cachefile=resolve_titles_cachefile(snapshot),
                    extensions=extensions,
                ),
                Styles.INFO,
            )
        )


def run(argv: list[str] | None = None) -> None:
    """Entry point wrapper allowing optional argument override."""
    if argv is None:
        app()
    else:
        app(args=list(argv))
