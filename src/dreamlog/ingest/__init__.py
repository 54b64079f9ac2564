"""
DreamLog Ingestion
==================

Modules:
    extractor:    HTML journal export → DraftRecord
    orchestrator: concurrent, failure-isolated batch import
"""

from .extractor import FieldExtractor, extract_draft
from .orchestrator import (
    BatchImportResult,
    FileOutcome,
    ImportFile,
    ImportOrchestrator,
    ImportStatus,
    import_files,
)

__all__ = [
    "FieldExtractor",
    "extract_draft",
    "BatchImportResult",
    "FileOutcome",
    "ImportFile",
    "ImportOrchestrator",
    "ImportStatus",
    "import_files",
]
