"""
Command-line interface for the document management service.

Usage:
    python -m app classify [--isolate-failures]
    python -m app search QUERY [--fallback]
    python -m app seed-categories
    python -m app stats
"""

import argparse
import asyncio
import json
import sys

from app.config import get_settings
from app.db.store import get_document_store
from app.db.supabase_client import get_supabase_client
from app.middleware.logging import configure_logging
from app.services.category_seed import seed_categories
from app.services.document_classifier import classify_documents
from app.services.search_engine import run_fallback_search, search_documents
from app.services.statistics import get_statistics


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="docmanager",
        description="Document management CLI - classify, search and inspect stored documents"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    classify_parser = subparsers.add_parser(
        "classify",
        help="Classify every stored document against the keyword dictionary"
    )
    classify_parser.add_argument(
        "--isolate-failures",
        action="store_true",
        default=None,
        help="Keep going when an assignment write fails (default: from env)"
    )

    search_parser = subparsers.add_parser(
        "search",
        help="Search documents by title and content"
    )
    search_parser.add_argument("query", type=str, help="Text to search for")
    search_parser.add_argument(
        "--fallback",
        action="store_true",
        help="Skip the database search and scan documents in-process"
    )

    subparsers.add_parser("seed-categories", help="Insert the default category taxonomy")
    subparsers.add_parser("stats", help="Print usage statistics as JSON")

    return parser


async def classify_command(args: argparse.Namespace) -> int:
    settings = get_settings()
    isolate = (
        args.isolate_failures
        if args.isolate_failures is not None
        else settings.classification_isolate_failures
    )

    store = get_document_store()
    documents = await store.fetch_all_documents()
    result = await classify_documents(store, documents, isolate_failures=isolate)

    for outcome in result.outcomes:
        line = f"{outcome.document_id}: {outcome.status}"
        if outcome.category_code:
            line += f" [{outcome.category_code}] confidence={outcome.confidence:.2f}"
        if outcome.reason:
            line += f" ({outcome.reason})"
        print(line)

    print(json.dumps(result.summary(), ensure_ascii=False))
    return 1 if result.count("failed") > 0 else 0


async def search_command(args: argparse.Namespace) -> int:
    if not args.query.strip():
        print("Error: query must not be empty")
        return 1

    store = get_document_store()
    if args.fallback:
        results = await run_fallback_search(store, args.query)
    else:
        results = await search_documents(store, args.query)

    for result in results:
        print(f"{result.id}  {result.display_title}")
        for snippet in (result.matches or result.highlights or []):
            print(f"    {snippet}")

    print(f"\n{len(results)} result(s)")
    return 0


async def seed_command(args: argparse.Namespace) -> int:
    outcome = await seed_categories(get_supabase_client())
    print(f"{outcome['message']} ({outcome['count']})")
    return 0


async def stats_command(args: argparse.Namespace) -> int:
    stats = await get_statistics(get_supabase_client())
    print(json.dumps(stats.model_dump(), indent=2, ensure_ascii=False))
    return 0


COMMANDS = {
    "classify": classify_command,
    "search": search_command,
    "seed-categories": seed_command,
    "stats": stats_command,
}


def main() -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    handler = COMMANDS.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}")
        return 1

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Configuration error: {e}")
        print("\nMake sure you have a .env file with:")
        print("  SUPABASE_URL=https://your-project.supabase.co")
        print("  SUPABASE_KEY=your_anon_key")
        return 1

    configure_logging(settings.log_level)

    try:
        return asyncio.run(handler(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except RuntimeError as e:
        print(f"\nError: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
