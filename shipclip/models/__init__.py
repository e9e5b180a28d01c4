"""Domain models for the shipment clipboard importer."""

from .config_models import DatabaseConfig, ImportConfig
from .error_record import ErrorRecord
from .import_result import BatchStatsAccumulator, FileStat, ImportResult
from .resolver_settings import ResolverSettings
from .shipment import SHIPMENT_COLUMNS, ImportedShipment
from .shipment_record import ShipmentRecord
from .source_file import FileStatus, SourceFile

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    "ResolverSettings",
    # Record models
    "ShipmentRecord",
    "ImportedShipment",
    "SHIPMENT_COLUMNS",
    # Processing models
    "SourceFile",
    "FileStatus",
    "FileStat",
    "ImportResult",
    "BatchStatsAccumulator",
    "ErrorRecord",
]
