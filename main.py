#!/usr/bin/env python3
import asyncio
import argparse
import sys
from pathlib import Path

from popravci.categories import secondary_categories
from popravci.config import Config
from popravci.data_processing import load_json, strip_html
from popravci.logging import setup_logging
from popravci.models import SORT_FIELDS, QueryState, SearchResult
from popravci.search import DirectorySearchEngine, DirectorySnapshot, load_snapshot


async def get_snapshot(data_path: str = None) -> DirectorySnapshot:
    if data_path:
        path = Path(data_path)
        if not path.exists():
            print(f"Error: Snapshot file not found: {path}")
            sys.exit(1)
        print(f"\nLoading majstori from {path}...")
        return DirectorySnapshot.from_rows(load_json(str(path)))

    print("\nFetching majstori from backend...")
    return await load_snapshot()


def print_results(result: SearchResult, state: QueryState, debug: bool = False):
    if result.error:
        print(f"\nCould not load majstori: {result.error}")

    print(f"\n{result.total_count} majstori found")
    if state.is_searching:
        print("(sorted by relevance)")
    print("-" * 50)

    if not result.items:
        print("No majstori found matching your filters.")
        return

    offset = (result.page_number - 1) * result.page_size
    for i, majstor in enumerate(result.items, start=offset + 1):
        header = f"\n  {i}. {majstor.name}"
        if majstor.search_score is not None:
            header += f" (score: {majstor.search_score:.0f})"
        print(header)
        print(f"     {majstor.location or 'Location not specified'}")
        if majstor.service_area:
            print(f"     Service area: {majstor.service_area}")
        if majstor.categories:
            shown = ", ".join(majstor.categories[:3])
            if len(majstor.categories) > 3:
                shown += f" +{len(majstor.categories) - 3} more"
            print(f"     {shown}")

        details = []
        if majstor.wait_time_days is not None:
            details.append(f"Wait: {majstor.wait_time_days} days")
        if majstor.emergency_available:
            details.append("Emergency")
        if majstor.weekend_evening:
            details.append("Weekend/Evening")
        if details:
            print(f"     {' | '.join(details)}")
        if majstor.contacts:
            print(f"     Tel: {majstor.contacts[0]}")
        if debug and majstor.bio:
            print(f"     {strip_html(majstor.bio, limit=80)}")
        if debug:
            services = secondary_categories(majstor)
            if services:
                print(f"     Services: {', '.join(services[:4])}")

    print(f"\nPage {result.page_number} of {result.total_pages}")


async def interactive_mode(engine: DirectorySearchEngine, state: QueryState):
    print("\n" + "="*60)
    print("INTERACTIVE MODE")
    print("="*60)
    print("\nEnter a search. Type 'quit' or 'exit' to stop.")
    print("Commands: 'next', 'prev', 'reset', 'debug'.")
    print("-" * 60)

    debug = False
    result = None

    while True:
        try:
            query = input("\nSearch: ").strip()

            if query.lower() in ('quit', 'exit', 'q'):
                print("\nGoodbye!")
                break

            if query.lower() == 'debug':
                debug = not debug
                print(f"Debug mode: {'ON' if debug else 'OFF'}")
                continue

            total = result.total_pages if result else 0
            if query.lower() == 'next':
                state = state.go_to_page(state.page_number + 1, total)
            elif query.lower() == 'prev':
                state = state.go_to_page(state.page_number - 1, total)
            elif query.lower() == 'reset':
                state = state.reset()
            else:
                state = state.with_search(query)

            result = engine.apply_query(state)
            print_results(result, state, debug=debug)

        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            break


async def main():
    parser = argparse.ArgumentParser(
        description="Popravci majstori directory search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --data data/majstori.json
  python main.py --data data/majstori.json --query "curi voda"
  python main.py --data data/majstori.json --category Vodoinstalacije --location zagreb
  python main.py --interactive
        """
    )

    parser.add_argument("--data", type=str, help=f"Snapshot JSON, e.g. {Config.DATA_PATH}; fetched from the backend when omitted")
    parser.add_argument("--query", "-q", type=str, default="")
    parser.add_argument("--category", action="append", default=[])
    parser.add_argument("--language", action="append", default=[])
    parser.add_argument("--emergency", action="store_true")
    parser.add_argument("--weekend", action="store_true")
    parser.add_argument("--location", type=str, default="")
    parser.add_argument("--sort", choices=SORT_FIELDS, default="name")
    parser.add_argument("--desc", action="store_true")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=Config.DEFAULT_PAGE_SIZE)
    parser.add_argument("--interactive", "-i", action="store_true")
    parser.add_argument("--debug", action="store_true")

    args = parser.parse_args()

    setup_logging("DEBUG" if args.debug else None)

    snapshot = await get_snapshot(args.data)
    print(f"Loaded {len(snapshot)} majstori")

    state = QueryState(
        categories=tuple(args.category),
        languages=tuple(args.language),
        emergency_only=args.emergency,
        weekend_only=args.weekend,
        location_query=args.location,
        free_text_query=args.query,
        sort_field=args.sort,
        sort_order="desc" if args.desc else "asc",
        page_number=max(args.page, 1),
        page_size=max(args.page_size, 1),
    )
    engine = DirectorySearchEngine(snapshot)

    if args.interactive:
        await interactive_mode(engine, state)
        return

    print_results(engine.apply_query(state), state, debug=args.debug)


if __name__ == "__main__":
    asyncio.run(main())
