"""Archive processors: ingestion, healing and publishing."""

from .heal_processor import HealingScanner, HealReport
from .ingest_processor import IngestionSequencer, IngestReport
from .publisher import PublishResult, SyncPublisher

__all__ = [
    "HealReport",
    "HealingScanner",
    "IngestReport",
    "IngestionSequencer",
    "PublishResult",
    "SyncPublisher",
]
