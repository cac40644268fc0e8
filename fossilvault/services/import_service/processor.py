"""Batch processing for specimen imports."""

import asyncio
import inspect
import logging
import time
import uuid
from typing import AsyncIterator, Awaitable, Callable, Iterable, NamedTuple, Optional, Union

from fossilvault.schemas.import_schemas import (
    ImportProgress,
    ImportSummary,
    ImportWarning,
    SpecimenDraft,
)

from .constants import BATCH_SIZE, DEFAULT_CURRENCY
from .converters import draft_to_specimen
from .errors import DuplicateInventoryIdError, RowImportError
from .store import SpecimenStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ImportProgress], Union[None, Awaitable[None]]]


class RowResult(NamedTuple):
    """Outcome of importing one draft: a record ID or the error that stopped it."""

    row_index: int
    record_id: Optional[str] = None
    error: Optional[RowImportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ImportRun:
    """One sequential import of the importable drafts.

    Iterate it with ``async for`` to drive the import; each row is processed
    only when the consumer asks for the next progress snapshot. Call
    ``cancel()`` (or set the event passed in) to stop between rows, and
    ``summary()`` once iteration has ended.

    Example:
        run = import_selected(drafts, owner_id, store, source_name="fossils.csv")
        async for progress in run:
            print(progress.completed_count, "/", progress.total_specimens)
        summary = run.summary()
    """

    def __init__(
        self,
        drafts: Iterable[SpecimenDraft],
        owner_id: str,
        store: SpecimenStore,
        *,
        source_name: str = "",
        batch_size: int = BATCH_SIZE,
        default_currency: str = DEFAULT_CURRENCY,
        cancel_event: asyncio.Event | None = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        drafts = list(drafts)
        self.owner_id = owner_id
        self.store = store
        self.source_name = source_name
        self.batch_size = batch_size
        self.default_currency = default_currency
        self.import_id = uuid.uuid4().hex

        self.selected = [d for d in drafts if d.selected]
        self.importable = [d for d in self.selected if d.is_importable]

        self._cancel_event = cancel_event or asyncio.Event()
        self._imported_count = 0
        self._failed_count = 0
        self._record_ids: list[str] = []
        self._warnings: list[ImportWarning] = []
        self._seen_inventory_ids: set[str] = set()
        self._started = False
        self._finished = False
        self._completed = False
        self._cancelled = False
        self._duration_ms = 0

    def cancel(self) -> None:
        """Ask the run to stop before the next row."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def completed(self) -> bool:
        return self._completed

    def __aiter__(self) -> AsyncIterator[ImportProgress]:
        if self._started:
            raise RuntimeError("An import run can only be iterated once")
        self._started = True
        return self._run()

    def _snapshot(self, **kwargs) -> ImportProgress:
        return ImportProgress(
            total_specimens=len(self.importable),
            imported_count=self._imported_count,
            failed_count=self._failed_count,
            **kwargs,
        )

    async def _run(self) -> AsyncIterator[ImportProgress]:
        started = time.monotonic()
        total = len(self.importable)
        logger.info(
            "Import %s started: %d of %d selected rows importable from %s",
            self.import_id,
            total,
            len(self.selected),
            self.source_name or "<unnamed>",
        )
        try:
            yield self._snapshot()

            for batch_start in range(0, total, self.batch_size):
                batch = self.importable[batch_start:batch_start + self.batch_size]
                logger.debug(
                    "Import %s: batch of %d starting at row %d",
                    self.import_id,
                    len(batch),
                    batch[0].row_index + 1,
                )
                for draft in batch:
                    if self._cancel_event.is_set():
                        self._cancelled = True
                        logger.info(
                            "Import %s cancelled after %d rows",
                            self.import_id,
                            self._imported_count + self._failed_count,
                        )
                        yield self._snapshot(cancelled=True)
                        return

                    result = await self._import_row(draft)
                    if result.ok:
                        yield self._snapshot(current_specimen=draft.display_name)
                    else:
                        yield self._snapshot(
                            current_specimen=draft.display_name,
                            last_error=str(result.error),
                        )

            self._completed = True
            logger.info(
                "Import %s finished: %d imported, %d failed",
                self.import_id,
                self._imported_count,
                self._failed_count,
            )
            yield self._snapshot(completed=True)
        finally:
            self._duration_ms = int((time.monotonic() - started) * 1000)
            self._finished = True

    async def _import_row(self, draft: SpecimenDraft) -> RowResult:
        """Convert, check and save one draft. Never raises for row-level failures."""
        try:
            record = draft_to_specimen(draft, self.owner_id, self.default_currency)
            inventory_id = record.inventory_id
            if inventory_id:
                if inventory_id in self._seen_inventory_ids:
                    raise DuplicateInventoryIdError(inventory_id)
                if await self.store.find_by_inventory_id(inventory_id) is not None:
                    raise DuplicateInventoryIdError(inventory_id)
            record_id = await self.store.save(record)
        except RowImportError as e:
            error = e
        except Exception as e:
            error = RowImportError(str(e) or type(e).__name__)
        else:
            self._imported_count += 1
            self._record_ids.append(record_id)
            if inventory_id:
                self._seen_inventory_ids.add(inventory_id)
            self._warnings.extend(
                ImportWarning(
                    row_number=draft.row_index + 1,
                    specimen_name=draft.display_name,
                    field=w.field,
                    message=w.message,
                    original_value=w.original_value,
                    corrected_value=w.corrected_value,
                )
                for w in draft.warnings
            )
            return RowResult(row_index=draft.row_index, record_id=record_id)

        self._failed_count += 1
        logger.warning("Import error on row %d: %s", draft.row_index + 1, error)
        return RowResult(row_index=draft.row_index, error=error)

    def summary(self) -> ImportSummary:
        """Build the summary of a finished run.

        Rows selected but blocked by validation, and rows never reached
        because the run was cancelled, count as skipped.

        Raises:
            RuntimeError: If the run has not been iterated to its end.
        """
        if not self._finished:
            raise RuntimeError("Import run has not finished")
        total = len(self.selected)
        return ImportSummary(
            import_id=self.import_id,
            source_name=self.source_name,
            total_processed=total,
            success_count=self._imported_count,
            failed_count=self._failed_count,
            skipped_count=total - self._imported_count - self._failed_count,
            warnings=list(self._warnings),
            duration_ms=self._duration_ms,
            imported_record_ids=list(self._record_ids),
        )


def import_selected(
    drafts: Iterable[SpecimenDraft],
    owner_id: str,
    store: SpecimenStore,
    *,
    source_name: str = "",
    batch_size: int = BATCH_SIZE,
    default_currency: str = DEFAULT_CURRENCY,
    cancel_event: asyncio.Event | None = None,
) -> ImportRun:
    """Create an import run for the selected, unblocked drafts.

    Nothing happens until the returned run is iterated.

    Args:
        drafts: Drafts from ``build_drafts``, with any selection changes.
        owner_id: Owner of the created records.
        store: Where records are looked up and saved.
        source_name: File name recorded in the summary.
        batch_size: Drafts per batch.
        default_currency: Currency for prices without one.
        cancel_event: Optional event that stops the run when set.

    Returns:
        An ImportRun yielding ImportProgress snapshots.
    """
    return ImportRun(
        drafts,
        owner_id,
        store,
        source_name=source_name,
        batch_size=batch_size,
        default_currency=default_currency,
        cancel_event=cancel_event,
    )


async def run_import(
    drafts: Iterable[SpecimenDraft],
    owner_id: str,
    store: SpecimenStore,
    *,
    on_progress: ProgressCallback | None = None,
    **options,
) -> ImportSummary:
    """Run an import to the end and return its summary.

    Args:
        drafts: Drafts to import.
        owner_id: Owner of the created records.
        store: Where records are looked up and saved.
        on_progress: Optional callback, sync or async, given every snapshot.
        **options: Passed to ``import_selected``.

    Returns:
        The ImportSummary of the run.
    """
    run = import_selected(drafts, owner_id, store, **options)
    async for progress in run:
        if on_progress is not None:
            result = on_progress(progress)
            if inspect.isawaitable(result):
                await result
    return run.summary()
