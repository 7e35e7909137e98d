"""
Command-line entry point for the catalog client
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from brainbox import __version__
from brainbox.api.client import CatalogClient
from brainbox.catalog.models import Item, ItemType, resolve_file_url
from brainbox.config import PAGE_SIZE_OPTIONS, Settings, get_settings
from brainbox.display.catalog_view import CatalogView
from brainbox.display.reconciler import Page
from brainbox.search.ranking import match_label
from brainbox.utils import get_logger, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brainbox", description="Browse and search your content catalog"
    )
    parser.add_argument(
        "--type", choices=[t.value for t in ItemType], help="primary type filter"
    )
    parser.add_argument("--sub", help="domain (links) or extension (documents)")
    parser.add_argument("--query", "-q", help="semantic search query")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, choices=PAGE_SIZE_OPTIONS)
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def _payload_cell(item: Item, settings: Settings) -> str:
    if item.type is ItemType.DOCUMENT:
        return resolve_file_url(item.file_path, settings.api_base_url) or "-"
    if item.type is ItemType.NOTE:
        return (item.content or "")[:120]
    return item.payload or "-"


def render_page(
    console: Console, view: CatalogView, page: Page, settings: Settings
) -> None:
    searching = view.search_state.active
    table = Table(title=f"Page {page.page}/{page.total_pages} ({page.total} items)")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Tags")
    table.add_column("Content")
    if searching:
        table.add_column("Match")

    for item in page.items:
        row = [
            item.title,
            item.type.value,
            ", ".join(item.tags),
            _payload_cell(item, settings),
        ]
        if searching:
            score = view.search_state.scores.get(item.id)
            row.append(match_label(score) if score is not None else "Keyword match")
        table.add_row(*row)

    console.print(table)
    counts = ", ".join(f"{t.value}: {n}" for t, n in view.available_types().items())
    console.print(f"Types: {counts or 'none'}")


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    logger = get_logger("brainbox")
    console = Console()

    async with CatalogClient.from_settings(settings) as client:
        view = CatalogView(client, settings=settings)
        await view.load()
        if view.store.error:
            console.print(f"[red]{view.store.error}[/red]")
            return 1

        if args.type:
            view.toggle_type(ItemType(args.type))
            if args.sub:
                view.select_sub_filter(ItemType(args.type), args.sub)

        if args.query:
            state = await view.search(args.query)
            if state.error:
                console.print(f"[red]{state.error}[/red]")
                return 1
            if state.message:
                console.print(state.message)

        if args.page_size:
            view.set_page_size(args.page_size)
        view.set_page(args.page)

        page = view.current_page()
        logger.debug("Rendering page", page=page.page, total=page.total)
        render_page(console, view, page, settings)
    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
