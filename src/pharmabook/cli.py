"""Command line access to the condition catalog"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from pharmabook.catalog.filters import TABS, parse_tab
from pharmabook.config import SETTINGS
from pharmabook.favorites.storage import JsonFileStorage
from pharmabook.favorites.store import KeyValueFavoritesStore
from pharmabook.gateway.client import SupabaseGateway
from pharmabook.logging_conf import setup_logging
from pharmabook.view.state import CatalogBrowser, FilterState

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pharmabook",
        description="Browse conditions, systems and medications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m pharmabook.cli systems
    python -m pharmabook.cli list --system respiratorio --search tosse
    python -m pharmabook.cli show asma
    python -m pharmabook.cli favorite asma
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("systems", help="List body systems with condition counts")

    p_list = sub.add_parser("list", help="List conditions")
    p_list.add_argument("--tab", default="all", help=f"One of: {', '.join(TABS)}")
    p_list.add_argument("--system", help="System id to restrict to")
    p_list.add_argument("--search", default="", help="Text to look for in name or description")

    p_show = sub.add_parser("show", help="Show a condition as JSON")
    p_show.add_argument("condition_id")

    p_fav = sub.add_parser("favorite", help="Toggle a condition in favorites")
    p_fav.add_argument("condition_id")
    return parser


def run(args: argparse.Namespace, browser: CatalogBrowser) -> int:
    if args.command == "favorite":
        favorite = browser.toggle_favorite(args.condition_id)
        if browser.notice is not None:
            logger.error(browser.notice.message)
            return 1
        state = "added to" if favorite else "removed from"
        print(f"{args.condition_id} {state} favorites ({browser.favorites_count()} total)")
        return 0

    if not browser.reload():
        logger.error(browser.notice.message if browser.notice else "Catalog not loaded")
        return 1

    if args.command == "systems":
        for s in browser.catalog.systems:
            print(f"{s.icon or ' '} {s.id:20s} {s.name:30s} {s.count:4d}")
    elif args.command == "list":
        try:
            tab = parse_tab(args.tab)
        except ValueError as e:
            logger.error(str(e))
            return 2
        browser.filters = FilterState(tab=tab, system_filter=args.system, search_term=args.search)
        print(browser.list_title())
        for c in browser.visible_conditions():
            mark = "*" if browser.is_favorite(c.id) else " "
            print(f"{mark} {c.id:24s} {c.name} - {c.desc}")
    elif args.command == "show":
        browser.open_condition(args.condition_id)
        detail = browser.current_detail()
        if detail is None:
            logger.error(f"Condition not found: {args.condition_id}")
            return 1
        print(json.dumps(detail.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    browser = CatalogBrowser(
        SupabaseGateway(),
        KeyValueFavoritesStore(JsonFileStorage(SETTINGS.favorites_path)),
    )
    return run(args, browser)


if __name__ == "__main__":
    sys.exit(main())
