"""Media-focused CLI for browsing the public catalog."""

from __future__ import annotations

import argparse
from typing import Callable, Optional, Sequence

from mediadesk.backend.catalog.formatting import format_date
from mediadesk.backend.catalog.query import ALL_CATEGORIES, QueryState, SortKey, apply, available_categories
from mediadesk.backend.catalog.search import SearchOrder, search_catalog
from mediadesk.backend.content.models import ApiResponse, MediaModelFacade, MediaType
from mediadesk.backend.content.public_api import PublicAPI
from mediadesk.backend.content.store import PublicDataStore
from ._utils import (
    build_subparser,
    exit_with_error,
    print_json,
    require_subcommand,
    to_serializable,
)

_API: Optional[PublicAPI] = None
_FACADE = MediaModelFacade()

# media type -> (collection fetcher, page attribute)
_COLLECTIONS: dict[MediaType, tuple[str, str]] = {
    MediaType.ARTICLE: ("get_articles", "articles"),
    MediaType.VIDEO: ("get_videos", "videos"),
    MediaType.TVSHOW: ("get_tv_shows", "tv_shows"),
    MediaType.PODCAST: ("get_podcasts", "podcasts"),
}

_LOOKUPS: dict[MediaType, str] = {
    MediaType.ARTICLE: "get_article",
    MediaType.VIDEO: "get_video",
    MediaType.TVSHOW: "get_tv_show",
    MediaType.PODCAST: "get_podcast",
}


def _api() -> PublicAPI:
    global _API
    if _API is None:
        _API = PublicAPI()
    return _API


def _fetch_items(args: argparse.Namespace):  # noqa: ANN202
    media_type = MediaType(args.media_type)
    method_name, attribute = _COLLECTIONS[media_type]
    fetch: Callable[..., ApiResponse] = getattr(_api(), method_name)
    response = fetch(limit=args.limit, page=args.page, featured=args.featured)
    if not response.ok:
        exit_with_error(response.message or "Content unavailable")
    return _FACADE.media_items(getattr(response.data, attribute)), response.data.pagination


def _handle_list(args: argparse.Namespace) -> None:
    items, pagination = _fetch_items(args)
    query = QueryState(
        search_text=args.search or "",
        category_filter=args.category or ALL_CATEGORIES,
        sort_key=SortKey(args.sort),
    )
    view = apply(items, query)
    payload = {
        "items": [
            {**to_serializable(item), "display_date": format_date(item.publish_date)}
            for item in view
        ],
        "count": len(view),
        "pagination": to_serializable(pagination),
    }
    print_json(payload)


def _handle_categories(args: argparse.Namespace) -> None:
    items, _ = _fetch_items(args)
    print_json(available_categories(items))


def _handle_show(args: argparse.Namespace) -> None:
    media_type = MediaType(args.media_type)
    response = getattr(_api(), _LOOKUPS[media_type])(args.item_id)
    if not response.ok:
        exit_with_error(response.message or "Content unavailable")
        return
    print_json(to_serializable(_FACADE.media_item(response.data)))


def _handle_search(args: argparse.Namespace) -> None:
    store = PublicDataStore(_api())
    store.refresh()
    results = search_catalog(
        store.all_items(),
        args.query,
        media_type=args.media_type,
        category=args.category,
        order=args.order,
    )
    print_json([{"score": result.score, **to_serializable(result.item)} for result in results])


def _handle_health(_: argparse.Namespace) -> None:
    response = _api().health_check()
    print_json(to_serializable(response))
    if not response.success:
        raise SystemExit(1)


def _add_collection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("media_type", choices=[t.value for t in MediaType], help="Content collection to query.")
    parser.add_argument("--limit", type=int, default=50, help="Number of records to request from the API.")
    parser.add_argument("--page", type=int, help="Page of the collection to request.")
    parser.add_argument("--featured", action="store_true", help="Only request featured records.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mediadesk", description="Browse and search the public media catalog.")
    subparsers = parser.add_subparsers(dest="command")
    require_subcommand(subparsers)

    list_parser = build_subparser(subparsers, "list", help="List a collection filtered and sorted client-side.")
    _add_collection_arguments(list_parser)
    list_parser.add_argument("--search", help="Case-insensitive text matched against title and description.")
    list_parser.add_argument("--category", help="Exact category name to keep.")
    list_parser.add_argument(
        "--sort",
        choices=[k.value for k in SortKey],
        default=SortKey.NEWEST.value,
        help="Ordering of the listed records.",
    )
    list_parser.set_defaults(func=_handle_list)

    categories_parser = build_subparser(subparsers, "categories", help="List the categories present in a collection.")
    _add_collection_arguments(categories_parser)
    categories_parser.set_defaults(func=_handle_categories)

    show_parser = build_subparser(subparsers, "show", help="Display a single record.")
    show_parser.add_argument("media_type", choices=[t.value for t in MediaType])
    show_parser.add_argument("item_id", help="Record identifier.")
    show_parser.set_defaults(func=_handle_show)

    search_parser = build_subparser(subparsers, "search", help="Relevance search across every collection.")
    search_parser.add_argument("query", help="Text to search for.")
    search_parser.add_argument(
        "--media-type",
        choices=[ALL_CATEGORIES, *[t.value for t in MediaType]],
        default=ALL_CATEGORIES,
        help="Restrict results to one content type.",
    )
    search_parser.add_argument("--category", default=ALL_CATEGORIES, help="Exact category name to keep.")
    search_parser.add_argument(
        "--order",
        choices=[o.value for o in SearchOrder],
        default=SearchOrder.RELEVANCE.value,
        help="Result ordering.",
    )
    search_parser.set_defaults(func=_handle_search)

    health_parser = build_subparser(subparsers, "health", help="Check that the content API answers.")
    health_parser.set_defaults(func=_handle_health)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return
    handler(args)


if __name__ == "__main__":  # pragma: no cover
    main()
