"""Run queries from queries.csv against a snapshot and output ranked results."""
import json
import csv
import sys
from pathlib import Path

from tqdm import tqdm

sys.path.insert(0, str(Path(__file__).parent.parent))
from popravci.config import Config
from popravci.data_processing import load_json, profile_summary
from popravci.models import QueryState
from popravci.search import DirectorySearchEngine, DirectorySnapshot


def run_queries(
    queries_path: str,
    data_path: str,
    output_path: str,
    top_k: int = Config.DEFAULT_PAGE_SIZE,
    debug: bool = False
):
    print("Loading data...")
    snapshot = DirectorySnapshot.from_rows(load_json(data_path))
    engine = DirectorySearchEngine(snapshot)

    queries = []
    with open(queries_path, 'r', encoding='utf-8') as f:
        reader = csv.reader(f)
        for row in reader:
            if row and row[0].strip():
                queries.append(row[0].strip())

    print(f"Processing {len(queries)} queries against {len(snapshot)} majstori...")

    all_results = []
    for query in tqdm(queries):
        state = QueryState(free_text_query=query, page_size=top_k)
        result = engine.apply_query(state)

        all_results.append({
            "query": query,
            "total_count": result.total_count,
            "results": [profile_summary(r) for r in result.items]
        })

        if debug:
            top = ", ".join(f"{r.name} ({r.search_score:.0f})" for r in result.items[:3])
            tqdm.write(f"  {query}: {result.total_count} found. {top}")

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(all_results, f, indent=2, ensure_ascii=False)
    print(f"\nResults saved to {output_file}")

    empty = sum(1 for r in all_results if r["total_count"] == 0)
    if empty:
        print(f"{empty} queries returned no majstori")

    return all_results

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--queries", default=str(Config.QUERIES_PATH), help="Path to queries CSV")
    parser.add_argument("--data", default=str(Config.DATA_PATH), help="Path to majstori snapshot JSON")
    parser.add_argument("--output", default=str(Config.OUTPUT_DIR / "results.json"), help="Output path")
    parser.add_argument("--top-k", type=int, default=Config.DEFAULT_PAGE_SIZE, help="Results kept per query")
    parser.add_argument("--debug", action="store_true", help="Debug mode")
    args = parser.parse_args()

    run_queries(
        args.queries,
        args.data,
        args.output,
        top_k=args.top_k,
        debug=args.debug
    )
