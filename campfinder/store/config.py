from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class StoreConfig:
    backend: str = os.getenv("CAMPFINDER_STORE", "memory")
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_key: str = os.getenv("SUPABASE_KEY", "")
    camps_csv_path: Path = Path(__file__).resolve().parent.parent / "data" / "camps.csv"
    camps_table: str = "camps"
    responses_table: str = "quiz_responses"
    results_table: str = "quiz_results"


DEFAULT_STORE_CONFIG = StoreConfig()
