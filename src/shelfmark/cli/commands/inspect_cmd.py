# ABOUTME: The `shelfmark inspect` command for viewing extracted book metadata.
# ABOUTME: Shows the canonical entity for one EPUB or comic archive as a table or JSON.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfmark.reader import BookReadError, read_book

console = Console()


def _join(values: list[str]) -> str:
    return ", ".join(values) if values else "[dim]none[/dim]"


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the entity as JSON.")
@click.option(
    "--cover-out",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the cover image bytes to this file.",
)
def inspect(path: Path, as_json: bool, cover_out: Path | None) -> None:
    """Show metadata extracted from an EPUB or comic archive."""
    try:
        book = read_book(path, with_cover=cover_out is not None)
    except BookReadError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    if cover_out is not None:
        if not book.has_cover:
            console.print("[red]Error:[/red] no cover image found")
            raise SystemExit(1)
        cover_out.write_bytes(book.cover_image)

    meta = book.entity
    if as_json:
        click.echo(meta.to_json())
        return

    table = Table(title=str(path.name), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Format", book.module)
    table.add_row("Title", meta.title or "[dim]unknown[/dim]")
    table.add_row("Writers", _join(meta.writers))
    table.add_row("Series", meta.series or "[dim]none[/dim]")
    if meta.number is not None:
        table.add_row("Number", str(meta.number))
    table.add_row("Publisher", meta.publisher or "[dim]unknown[/dim]")
    table.add_row("Language", meta.language or "[dim]unknown[/dim]")
    table.add_row("Date", meta.date.isoformat() if meta.date else "[dim]unknown[/dim]")
    table.add_row("Summary", meta.summary or "[dim]none[/dim]")
    table.add_row("Genres", _join(meta.genres))
    table.add_row("Identifiers", _join(meta.identifiers))
    if meta.community_rating is not None:
        table.add_row("Rating", str(meta.community_rating))
    table.add_row("Age Rating", meta.age_rating.value)
    if meta.manga is not None:
        table.add_row("Manga", meta.manga.value)
    if meta.page_count is not None:
        table.add_row("Pages", str(meta.page_count))
    if meta.word_count is not None:
        table.add_row("Words", str(meta.word_count))
    table.add_row("Cover", book.cover.entry if book.cover else "no")

    console.print(table)
