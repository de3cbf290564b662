import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

class Config:
    SUPABASE_URL = os.getenv("SUPABASE_URL")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
    PROFESSIONALS_TABLE = os.getenv("PROFESSIONALS_TABLE", "majstori")
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30.0"))

    DEFAULT_PAGE_SIZE = 10
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATA_PATH = Path("data") / "majstori.json"
    QUERIES_PATH = Path("data") / "queries.csv"
    OUTPUT_DIR = Path("output")

    @classmethod
    def require_backend(cls) -> None:
        if not cls.SUPABASE_URL:
            raise ValueError("Missing SUPABASE_URL")
        if not cls.SUPABASE_ANON_KEY:
            raise ValueError("Missing SUPABASE_ANON_KEY")
