from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the camp catalog import.
    """

    raw_export_path: Path = Path("camp_data_from_database.csv")
    processed_data_dir: Path = Path(__file__).resolve().parent.parent / "data"
    processed_filename: str = "camps.csv"
    statuses: tuple[str, ...] = ("published",)

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_INGESTION_CONFIG = IngestionConfig()
