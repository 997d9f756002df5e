"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from epub_parts.commands.extract import execute_extract
from epub_parts.commands.info import display_info, display_manifest, display_toc
from epub_parts.config import ParseConfig
from epub_parts.core.epub_parser import EpubParser
from epub_parts.models.epub import Parts

app = typer.Typer(
    name="epub-parts",
    help="Inspect the structure of EPUB files: metadata, manifest, spine and table of contents.",
    add_completion=False,
)

console = Console()

BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
NoMimetypeCheck = Annotated[
    bool,
    typer.Option(
        "--no-mimetype-check",
        help="Accept archives whose mimetype entry is missing or wrong",
    ),
]
Encoding = Annotated[
    str,
    typer.Option(
        "--encoding",
        help="Encoding for documents without a byte order mark or declaration",
    ),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log parsing progress"),
    ] = False,
) -> None:
    """Inspect the structure of EPUB files."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load(book_path: Path, config: ParseConfig) -> Parts:
    with EpubParser(book_path, config) as parser:
        return parser.parse()


@app.command()
def info(
    book_path: BookPath,
    no_mimetype_check: NoMimetypeCheck = False,
    encoding: Encoding = "utf-8",
) -> None:
    """Display book metadata and table of contents."""
    config = ParseConfig(encoding=encoding, check_mimetype=not no_mimetype_check)
    try:
        parts = _load(book_path, config)
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    console.print()
    display_info(parts, console)
    console.print()
    display_toc(parts, console)


@app.command()
def toc(
    book_path: BookPath,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the table of contents as JSON"),
    ] = False,
    no_mimetype_check: NoMimetypeCheck = False,
    encoding: Encoding = "utf-8",
) -> None:
    """Display the resolved table of contents."""
    config = ParseConfig(encoding=encoding, check_mimetype=not no_mimetype_check)
    try:
        parts = _load(book_path, config)
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(
            data={
                "source": parts.toc_source.value if parts.toc_source else None,
                "chapters": [chapter.model_dump() for chapter in parts.toc.values()],
            }
        )
    else:
        display_toc(parts, console)


@app.command()
def manifest(
    book_path: BookPath,
    no_mimetype_check: NoMimetypeCheck = False,
    encoding: Encoding = "utf-8",
) -> None:
    """Display manifest items and their spine positions."""
    config = ParseConfig(encoding=encoding, check_mimetype=not no_mimetype_check)
    try:
        parts = _load(book_path, config)
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    display_manifest(parts, console)


@app.command()
def extract(
    book_path: BookPath,
    chapters: Annotated[
        str,
        typer.Option(
            "--chapters",
            "-c",
            help="Chapters to extract by position or id: '1,3,5-7', 'ch2,ch4' or 'all'",
        ),
    ] = "all",
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--output-dir",
            "-o",
            help="Output directory (default: {book_name}_chapters/)",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: markdown, text, or html",
        ),
    ] = "markdown",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
    no_mimetype_check: NoMimetypeCheck = False,
    encoding: Encoding = "utf-8",
) -> None:
    """Extract table of contents chapters to JSON files."""
    if output_format not in ("markdown", "text", "html"):
        console.print(
            f"[red]Invalid format: {output_format}. Use markdown, text, or html.[/]"
        )
        raise typer.Exit(1)

    config = ParseConfig(encoding=encoding, check_mimetype=not no_mimetype_check)
    try:
        execute_extract(
            book_path=book_path,
            chapters=chapters,
            output_dir=output_dir,
            output_format=output_format,  # type: ignore
            quiet=quiet,
            console=console,
            config=config,
        )
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
