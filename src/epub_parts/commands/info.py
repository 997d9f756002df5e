"""Display helpers for the info, toc and manifest commands."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from epub_parts.models.epub import Parts


def display_info(parts: Parts, console: Console) -> None:
    """Book metadata panel."""
    metadata = parts.metadata
    info_lines = [
        f"[bold]{metadata.title}[/]",
        "",
        f"[dim]Author(s):[/] {', '.join(metadata.authors) or 'Unknown'}",
        f"[dim]Language:[/] {metadata.language or 'Unknown'}",
        f"[dim]Publisher:[/] {metadata.publisher or 'Unknown'}",
        f"[dim]Identifier:[/] {metadata.identifier or 'Unknown'}",
        f"[dim]EPUB version:[/] {parts.version}",
        f"[dim]Manifest items:[/] {len(parts.manifest)}",
        f"[dim]Spine entries:[/] {len(parts.spine.contents)}",
        f"[dim]Chapters:[/] {len(parts.toc)}",
    ]
    if parts.toc_source is not None:
        source = parts.toc_source.value.replace("_", " ").title()
        info_lines.append(f"[dim]TOC source:[/] {source}")

    console.print(Panel("\n".join(info_lines), title="Book Information", border_style="green"))


def display_toc(parts: Parts, console: Console) -> None:
    """Table of contents in reading order, indented by level."""
    table = Table(title="Table of Contents", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Id", style="green")
    table.add_column("Href", style="dim")

    for chapter in parts.toc.values():
        indent = "  " * chapter.level
        table.add_row(
            str(chapter.order + 1),
            f"{indent}{chapter.title}",
            chapter.id or "",
            chapter.href or "",
        )

    console.print(table)


def display_manifest(parts: Parts, console: Console) -> None:
    """Manifest items, spine position first when the item is in the spine."""
    spine_positions = {item.id: i for i, item in enumerate(parts.spine.contents)}

    table = Table(title="Manifest", show_header=True, header_style="bold cyan")
    table.add_column("Spine", style="dim", justify="right", width=5)
    table.add_column("Id", style="green")
    table.add_column("Href", style="white")
    table.add_column("Media type", style="dim")
    table.add_column("Properties", style="yellow")

    for item in parts.manifest.values():
        position = spine_positions.get(item.id)
        table.add_row(
            "" if position is None else str(position + 1),
            item.id or "[red]<missing>[/]",
            item.href,
            item.media_type,
            item.properties or "",
        )

    console.print(table)
