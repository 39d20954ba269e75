from ygo_prices.pipeline.batch import (
    BatchProcessor,
    BatchReport,
    ProgressTracker,
    ResultEntry,
    needs_confirmation,
)
from ygo_prices.pipeline.export import ExportArtifact, ReportExporter, load_report
from ygo_prices.pipeline.name_sources import (
    is_batch_query,
    parse_free_text,
    parse_lines,
    read_name_file,
    validate_query,
    validate_upload,
)
from ygo_prices.pipeline.ygoprodeck import CardData, CardSetInfo, YGOProDeckClient

__all__ = [
    "BatchProcessor",
    "BatchReport",
    "CardData",
    "CardSetInfo",
    "ExportArtifact",
    "ProgressTracker",
    "ReportExporter",
    "ResultEntry",
    "YGOProDeckClient",
    "is_batch_query",
    "load_report",
    "needs_confirmation",
    "parse_free_text",
    "parse_lines",
    "read_name_file",
    "validate_query",
    "validate_upload",
]
