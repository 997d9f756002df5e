"""Extract command implementation."""

import logging
import re
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress

from epub_parts.config import ParseConfig
from epub_parts.core.content_processor import OutputFormat
from epub_parts.core.epub_parser import open_epub
from epub_parts.core.exceptions import EpubError
from epub_parts.core.output_writer import OutputWriter
from epub_parts.models.epub import Chapter

log = logging.getLogger(__name__)

_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def parse_chapter_selection(selection: str, chapters: list[Chapter]) -> list[int]:
    """Resolve a selection like "1,3,5-7", "all" or "ch2,ch4" to chapter positions.

    Numbers are 1-based positions in the table of contents. Anything else
    is looked up as a chapter id. Unknown tokens are ignored.
    """
    selection = selection.strip()
    if selection.lower() == "all":
        return list(range(len(chapters)))

    positions = {chapter.id: index for index, chapter in enumerate(chapters)}
    indices = set()
    for token in selection.split(","):
        token = token.strip()
        if not token:
            continue

        if token in positions:
            indices.add(positions[token])
        elif token.isdigit():
            indices.add(int(token) - 1)
        elif match := _RANGE.match(token):
            start, end = int(match.group(1)), int(match.group(2))
            indices.update(range(start - 1, end))
        else:
            log.debug(f"Ignoring chapter selection {token!r}")

    return sorted(i for i in indices if 0 <= i < len(chapters))


def get_default_output_dir(book_path: Path) -> Path:
    """Default output directory next to the book."""
    clean_stem = re.sub(r"[^\w\s-]", "", book_path.stem).strip()
    clean_stem = re.sub(r"[-\s]+", "_", clean_stem)
    return book_path.parent / f"{clean_stem}_chapters"


def execute_extract(
    book_path: Path,
    chapters: str,
    output_dir: Path | None,
    output_format: OutputFormat,
    quiet: bool,
    console: Console,
    config: ParseConfig | None = None,
) -> Path | None:
    """Write the selected chapters and a manifest; returns the manifest path."""
    epub = open_epub(book_path, config=config)
    try:
        toc = epub.chapters()
        selected = parse_chapter_selection(chapters, toc)

        if not selected:
            console.print("[yellow]No chapters selected. Exiting.[/]")
            return None

        final_output_dir = output_dir or get_default_output_dir(book_path)
        writer = OutputWriter(final_output_dir, book_path)
        chapter_metadata = []
        skipped = []

        with Progress(console=console, disable=quiet) as progress:
            task = progress.add_task("Extracting chapters...", total=len(selected))
            for index in selected:
                chapter = toc[index]
                try:
                    _, metadata = writer.write_chapter(epub, chapter, output_format)
                    chapter_metadata.append(metadata)
                except EpubError as e:
                    log.warning(f"Skipping chapter {chapter.id}: {e}")
                    skipped.append((chapter.title, str(e)))
                progress.update(
                    task, advance=1, description=f"Extracting: {chapter.title[:40]}..."
                )

        manifest_path = writer.write_manifest(epub, chapter_metadata)
    finally:
        epub.close()

    if not quiet:
        console.print()
        console.print(
            Panel(
                "\n".join(
                    [
                        f"[green]Successfully extracted {len(chapter_metadata)} chapter(s)[/]",
                        *(f"[yellow]Skipped {title}: {error}[/]" for title, error in skipped),
                        "",
                        f"[dim]Output directory:[/] {final_output_dir}",
                        f"[dim]Manifest:[/] {manifest_path.name}",
                    ]
                ),
                title="Complete",
                border_style="green",
            )
        )

    return manifest_path
