# src/espacogeek/cli.py
from __future__ import annotations

"""
EspacoGeek CLI

Commands:
  init-db         Create the catalog tables (idempotent).
  search          Name / alternative title / category search with projection & paging.
  show            Show a single media (optionally with its alternative titles).
  random-artwork  Print the banner URL of a random media.
"""

import argparse
import sys
from typing import Optional, Sequence

from . import db
from .dto import to_page_dto
from .errors import QueryExecutionError
from .query import MediaQueryService
from .repos import MediaRepository
from .search import PageRequest


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------

def _print_media(media, *, eager: bool = False) -> None:
    """Readable one-media summary for terminals."""
    print(f"[{media.id}] {media.name}")
    print(f"  Category:   {media.media_category_id if media.media_category_id is not None else 'N/A'}")
    if media.episode_count is not None:
        print(f"  Episodes:   {media.episode_count}")
    if media.banner:
        print(f"  Banner:     {media.banner}")
    if media.about:
        snippet = " ".join(media.about.split())
        print(f"  About:      {snippet[:239] + '…' if len(snippet) > 240 else snippet}")
    if eager:
        titles = [t.name for t in media.alternative_titles]
        print(f"  Also known: {', '.join(titles) if titles else '-'}")
    print()


# ------------------------------------------------------------------------------
# Command implementations
# ------------------------------------------------------------------------------

def cmd_init_db(_args) -> int:
    db.init_db()
    print(f"Initialized database at {db.DATABASE_URL}")
    return 0


def cmd_search(args) -> int:
    """
    Search via MediaRepository (dynamic query engine).
    Only id, name and the --field values that exist on Media are shown.
    """
    repo = MediaRepository()
    requested = {f: [] for f in (args.field or [])}
    try:
        page = repo.find_media_by_name_or_alternative_title_and_category(
            args.name,
            args.alt_title,
            args.category,
            requested,
            PageRequest.of(args.page, args.size),
        )
    except QueryExecutionError as exc:
        print(f"Search failed: {exc}", file=sys.stderr)
        return 2

    dto = to_page_dto(page, repo.projection(requested))
    for m in dto.content:
        extra = "  |  ".join(f"{k}={v}" for k, v in m.fields.items())
        print(f"[{m.id}] {m.name}" + (f"  |  {extra}" if extra else ""))
    if not dto.content:
        print("No results.")
    print(f"-- page {dto.number + 1}/{max(dto.total_pages, 1)}, {dto.total_elements} total")
    return 0


def cmd_show(args) -> int:
    svc = MediaQueryService()
    media = svc.find_by_id_eager(int(args.id)) if args.eager else svc.find_by_id(int(args.id))
    if not media:
        print(f"Media {args.id} not found.", file=sys.stderr)
        return 1
    _print_media(media, eager=args.eager)
    return 0


def cmd_random_artwork(_args) -> int:
    banner = MediaQueryService().random_artwork()
    if banner is None:
        print("No artwork available.", file=sys.stderr)
        return 1
    print(banner)
    return 0


# ------------------------------------------------------------------------------
# argparse wiring
# ------------------------------------------------------------------------------

def _page_size(raw: str) -> int:
    """argparse type for --size: an integer >= 1."""
    try:
        size = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid page size: {raw!r}")
    if size < 1:
        raise argparse.ArgumentTypeError(f"page size must be >= 1, got {size}")
    return size



def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="espacogeek",
        description="EspacoGeek CLI: search the games / series / movies / visual novels catalog."
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("init-db", help="Create tables.")
    sp.set_defaults(func=cmd_init_db)

    sp = sub.add_parser("search", help="Search medias with filters & pagination.")
    sp.add_argument("--name", default=None,
                    help="Case-insensitive substring match on name.")
    sp.add_argument("--alt-title", dest="alt_title", default=None,
                    help="Case-insensitive substring match on any alternative title.")
    sp.add_argument("--category", type=int, default=None,
                    help="Media category id (1 serie, 2 game, 3 visual novel, 4 movie).")
    sp.add_argument("--field", action="append", default=None,
                    help="Extra field to return (can repeat). e.g. --field banner --field cover")
    sp.add_argument("--page", type=int, default=0, help="Zero-based page number.")
    sp.add_argument("--size", type=_page_size, default=10, help="Page size (>= 1).")
    sp.set_defaults(func=cmd_search)

    sp = sub.add_parser("show", help="Show a single media.")
    sp.add_argument("id", help="Media id.")
    sp.add_argument("--eager", action="store_true", help="Also load alternative titles.")
    sp.set_defaults(func=cmd_show)

    sp = sub.add_parser("random-artwork", help="Print a random banner URL.")
    sp.set_defaults(func=cmd_random_artwork)

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
