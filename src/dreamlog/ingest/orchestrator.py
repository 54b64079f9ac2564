"""
Import Orchestrator – concurrent batch import of exported journal entries
=========================================================================

Each file is processed by its own task:
    1. Skip files whose extension is not a recognized document type
    2. Extract title/date/description (file mtime is the fallback date)
    3. Skip drafts with an empty description
    4. Enrich the description (title/tags/people)
    5. Build a Dream

Tasks never raise; every failure becomes a per-file FAILED outcome, so one
bad document cannot stop its siblings. The batch is joined with
``asyncio.gather`` and only after every file has settled are the new dreams
appended to the journal, in a single replace.

Usage:
    ```python
    orchestrator = ImportOrchestrator(journal, enricher)
    result = await orchestrator.import_batch(
        [ImportFile.from_path(p) for p in paths]
    )
    print(result.message)
    ```
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from loguru import logger

from dreamlog.core.config import ImporterConfig
from dreamlog.core.exceptions import BatchImportError
from dreamlog.core.journal import DreamJournal
from dreamlog.core.models import DEFAULT_TITLE, Dream, EnrichmentResult, new_dream_id

from .extractor import FieldExtractor


SUCCESS_MESSAGE = "Successfully imported {count} dream(s)!"
NO_DREAMS_MESSAGE = "No valid dreams found in selected files."
IMPORT_ERROR_MESSAGE = "An error occurred during import. Please check the logs."


class TextEnricher(Protocol):
    async def enrich_text(self, text: str) -> EnrichmentResult: ...


# =============================================================================
# Inputs and outcomes
# =============================================================================


@dataclass(frozen=True)
class ImportFile:
    """A named document blob with its last-modified calendar date."""
    name: str
    content: Union[str, bytes]
    last_modified: date

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "ImportFile":
        file_path = Path(path)
        stat = file_path.stat()
        return cls(
            name=file_path.name,
            content=file_path.read_bytes(),
            last_modified=datetime.fromtimestamp(stat.st_mtime).date(),
        )

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower()

    def text(self, encoding: str = "utf-8") -> str:
        if isinstance(self.content, bytes):
            return self.content.decode(encoding, errors="replace")
        return self.content


class ImportStatus(Enum):
    IMPORTED = "imported"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class FileOutcome:
    name: str
    status: ImportStatus
    dream: Optional[Dream] = None
    reason: Optional[str] = None


@dataclass
class BatchImportResult:
    """Aggregate result of one batch."""
    success: bool
    imported: List[Dream] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0
    message: str = ""
    outcomes: List[FileOutcome] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def files_total(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "imported": len(self.imported),
            "skipped": self.skipped,
            "failed": self.failed,
            "message": self.message,
            "duration_seconds": round(self.duration_seconds, 3),
            "dreams": [d.to_dict() for d in self.imported],
            "errors": [
                {"file": o.name, "reason": o.reason}
                for o in self.outcomes
                if o.status == ImportStatus.FAILED
            ][:10],
        }


# =============================================================================
# Orchestrator
# =============================================================================


class ImportOrchestrator:
    """Runs extraction + enrichment over a batch and appends the results."""

    def __init__(
        self,
        journal: DreamJournal,
        enricher: TextEnricher,
        extractor: Optional[FieldExtractor] = None,
        config: Optional[ImporterConfig] = None,
        id_factory: Callable[[], str] = new_dream_id,
    ):
        self.journal = journal
        self.enricher = enricher
        self.extractor = extractor or FieldExtractor()
        self.cfg = config or ImporterConfig()
        self.id_factory = id_factory

    @property
    def extensions(self) -> Tuple[str, ...]:
        return tuple(self.cfg.extensions)

    async def import_batch(self, files: Sequence[ImportFile]) -> BatchImportResult:
        """
        Import every file concurrently and append the successes in one step.

        Returns:
            BatchImportResult; on a batch-level fault ``success`` is False,
            the message is generic and the journal is left untouched.
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        logger.info(f"[ImportOrchestrator] Starting import of {len(files)} file(s)")

        try:
            outcomes: List[FileOutcome] = list(
                await asyncio.gather(*(self._import_one(f) for f in files))
            )
        except Exception as e:
            error = BatchImportError(str(e), files_total=len(files))
            logger.error(f"[ImportOrchestrator] {error}")
            return BatchImportResult(
                success=False,
                message=IMPORT_ERROR_MESSAGE,
                duration_seconds=loop.time() - start_time,
            )

        imported = [o.dream for o in outcomes if o.status == ImportStatus.IMPORTED]
        skipped = sum(1 for o in outcomes if o.status == ImportStatus.SKIPPED)
        failed = sum(1 for o in outcomes if o.status == ImportStatus.FAILED)

        if imported:
            self.journal.add_many(imported)
            message = SUCCESS_MESSAGE.format(count=len(imported))
        else:
            message = NO_DREAMS_MESSAGE

        duration = loop.time() - start_time
        logger.info(
            f"[ImportOrchestrator] Import completed: {len(imported)} imported, "
            f"{skipped} skipped, {failed} failed in {duration:.2f}s"
        )

        return BatchImportResult(
            success=True,
            imported=imported,
            skipped=skipped,
            failed=failed,
            message=message,
            outcomes=outcomes,
            duration_seconds=duration,
        )

    async def _import_one(self, file: ImportFile) -> FileOutcome:
        if file.extension not in self.extensions:
            logger.warning(f"[ImportOrchestrator] Skipping unsupported file: {file.name}")
            return FileOutcome(file.name, ImportStatus.SKIPPED, reason="unsupported file type")

        try:
            draft = self.extractor.extract(file.text(self.cfg.encoding), file.last_modified)
            if not draft.is_usable:
                logger.info(f"[ImportOrchestrator] No dream text in {file.name}, skipping")
                return FileOutcome(file.name, ImportStatus.SKIPPED, reason="empty description")

            enrichment = await self.enricher.enrich_text(draft.description)

            if draft.has_title:
                title = draft.title
            else:
                title = enrichment.title or DEFAULT_TITLE

            dream = Dream.create(
                description=draft.description,
                dream_date=draft.date,
                title=title,
                tags=enrichment.tags,
                people=enrichment.people,
                dream_id=self.id_factory(),
            )
        except Exception as e:
            logger.error(f"[ImportOrchestrator] Error processing file {file.name}: {e}")
            return FileOutcome(file.name, ImportStatus.FAILED, reason=str(e))

        return FileOutcome(file.name, ImportStatus.IMPORTED, dream=dream)


async def import_files(
    journal: DreamJournal,
    enricher: TextEnricher,
    paths: Sequence[Union[str, Path]],
    config: Optional[ImporterConfig] = None,
) -> BatchImportResult:
    """
    Convenience wrapper: read files from disk and import them as one batch.

    Unreadable paths count as failures without stopping the batch.
    """
    files: List[ImportFile] = []
    unreadable: List[FileOutcome] = []
    for path in paths:
        try:
            files.append(ImportFile.from_path(path))
        except OSError as e:
            logger.error(f"[ImportOrchestrator] Cannot read {path}: {e}")
            unreadable.append(FileOutcome(Path(path).name, ImportStatus.FAILED, reason=str(e)))

    orchestrator = ImportOrchestrator(journal, enricher, config=config)
    result = await orchestrator.import_batch(files)
    if result.success and unreadable:
        result.failed += len(unreadable)
        result.outcomes.extend(unreadable)
    return result


__all__ = [
    "ImportFile",
    "ImportStatus",
    "FileOutcome",
    "BatchImportResult",
    "ImportOrchestrator",
    "import_files",
    "SUCCESS_MESSAGE",
    "NO_DREAMS_MESSAGE",
    "IMPORT_ERROR_MESSAGE",
]
