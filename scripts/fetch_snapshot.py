import asyncio
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))
from popravci.backend import DirectoryClient
from popravci.config import Config
from popravci.data_processing import save_json
from popravci.exceptions import FetchError
from popravci.logging import setup_logging


async def fetch_snapshot(output_path: str):
    print("Fetching majstori from backend...")
    client = DirectoryClient()

    try:
        records = await client.fetch_all_professionals()
    except FetchError as e:
        print(f"Fetch failed: {e}")
        sys.exit(1)

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    save_json(str(output_file), records)

    print(f"Saved {len(records)} majstori to {output_file}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--output", default=str(Config.DATA_PATH), help="Where to write the snapshot JSON")
    args = parser.parse_args()

    setup_logging()
    asyncio.run(fetch_snapshot(args.output))
