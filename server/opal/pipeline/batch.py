"""
Batch assessment pipeline.

Extracts and assesses every artifact of an upload concurrently,
records each outcome in the session store, and only once every
artifact has finished (a join barrier) summarises the successful
assessments into the dashboard.  An artifact whose extraction
fails, or whose input is malformed, is reported as a failure and
left out of the summary; the rest of the batch carries on.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Sequence

from opal import extraction
from opal.analysis import dashboard as dashboard_mod
from opal.analysis import engine as engine_mod
from opal.models import assessment, dashboard, signals
from opal.pipeline import sessions, sse_helpers
from opal.utils import errors, logger

log = logger.create_logger("Batch")


def validate_batch(
    uploads: Sequence[dashboard.ArtifactUpload],
    max_files: int,
    max_file_size: int,
) -> None:
    """Reject empty or oversized uploads before a session is opened.

    Raises:
        InvalidInput: If there are no files, more than *max_files*,
            or any file larger than *max_file_size* bytes.
    """
    if not uploads:
        raise errors.InvalidInput("No files selected")
    if len(uploads) > max_files:
        raise errors.InvalidInput(f"Maximum {max_files} files allowed, got {len(uploads)}")
    oversized = [u.file_name for u in uploads if u.file_size > max_file_size]
    if oversized:
        raise errors.InvalidInput(f"Files exceed the {max_file_size} byte limit: {', '.join(oversized)}")


async def assess_upload(
    engine: engine_mod.PrivacyMetricsEngine,
    extractor: extraction.SignalExtractor,
    upload: dashboard.ArtifactUpload,
    semaphore: asyncio.Semaphore,
) -> assessment.PrivacyAssessment:
    """Extract signals for one upload and assess it.

    Raises:
        InvalidInput: If the file type is unsupported.
        ExtractionFailed: Propagated unchanged from the extractor.
    """
    kind = extraction.resolve_kind(upload.file_type)
    async with semaphore:
        extracted = await extractor.extract_signals(kind, upload.insights)
    return engine.assess(
        signals.ArtifactAnalysis(
            kind=kind,
            signals=tuple(extracted),
            file_name=upload.file_name,
            file_size=upload.file_size,
            metadata=upload.insights,
        )
    )


async def _process_one(
    engine: engine_mod.PrivacyMetricsEngine,
    extractor: extraction.SignalExtractor,
    upload: dashboard.ArtifactUpload,
    semaphore: asyncio.Semaphore,
    store: sessions.SessionStore,
    session_id: str,
) -> dashboard.ArtifactResult | dashboard.ArtifactFailure:
    """Assess one upload and record the outcome in the store."""
    try:
        result = await assess_upload(engine, extractor, upload, semaphore)
    except (errors.ExtractionFailed, errors.InvalidInput) as exc:
        failure = dashboard.ArtifactFailure(
            file_name=upload.file_name,
            error_type=type(exc).__name__,
            reason=errors.get_error_message(exc),
        )
        store.add_failure(session_id, failure)
        log.warn("Artifact skipped", {"file": upload.file_name, "error": failure.error_type, "reason": failure.reason})
        return failure
    return store.add_result(session_id, upload.file_name, result)


def _summarize(results: Sequence[dashboard.ArtifactResult]) -> dashboard.DashboardSummary | None:
    """Summarise the successes, or ``None`` when every artifact failed."""
    try:
        return dashboard_mod.summarize([r.assessment for r in results])
    except errors.EmptyBatch:
        log.warn("No artifacts were assessed; dashboard not generated")
        return None


async def run_batch(
    engine: engine_mod.PrivacyMetricsEngine,
    extractor: extraction.SignalExtractor,
    uploads: Sequence[dashboard.ArtifactUpload],
    store: sessions.SessionStore,
    session_id: str,
    max_concurrency: int = 4,
) -> dashboard.SessionRecord:
    """Assess a whole upload and complete its session.

    Args:
        engine: The shared engine.
        extractor: Signal extractor for the uploads.
        uploads: The files in this batch.
        store: Session store holding *session_id*.
        session_id: An open session created for *uploads*.
        max_concurrency: Most artifacts in flight at once.

    Returns:
        A snapshot of the completed session.
    """
    log.start_timer("batch")
    semaphore = asyncio.Semaphore(max_concurrency)
    tasks = [
        asyncio.create_task(_process_one(engine, extractor, u, semaphore, store, session_id)) for u in uploads
    ]
    try:
        outcomes = await asyncio.gather(*tasks)
    except Exception as exc:
        # Siblings must not keep writing to a session that has failed.
        for task in tasks:
            task.cancel()
        store.fail(session_id, errors.get_error_message(exc))
        raise

    results = [o for o in outcomes if isinstance(o, dashboard.ArtifactResult)]
    record = store.complete(session_id, _summarize(results))
    log.end_timer("batch", f"Batch of {len(uploads)} artifact(s) processed")
    return record


async def stream_batch(
    engine: engine_mod.PrivacyMetricsEngine,
    extractor: extraction.SignalExtractor,
    uploads: Sequence[dashboard.ArtifactUpload],
    store: sessions.SessionStore,
    session_id: str,
    max_concurrency: int = 4,
) -> AsyncGenerator[str]:
    """Same flow as :func:`run_batch`, yielding SSE events as artifacts finish."""
    yield sse_helpers.format_session_event(session_id, [u.file_name for u in uploads])
    yield sse_helpers.format_progress_event("assess-start", f"Assessing {len(uploads)} file(s)...", 0)

    semaphore = asyncio.Semaphore(max_concurrency)
    tasks = [
        asyncio.create_task(_process_one(engine, extractor, u, semaphore, store, session_id)) for u in uploads
    ]
    results: list[dashboard.ArtifactResult] = []
    try:
        for done, next_outcome in enumerate(asyncio.as_completed(tasks), start=1):
            outcome = await next_outcome
            if isinstance(outcome, dashboard.ArtifactResult):
                results.append(outcome)
                yield sse_helpers.format_assessment_event(outcome.file_name, outcome.assessment)
            else:
                yield sse_helpers.format_failure_event(outcome)
            yield sse_helpers.format_progress_event(
                "assess-file", f"Processed {done} of {len(uploads)}", 100 * done // len(uploads)
            )
    except Exception as exc:
        for task in tasks:
            task.cancel()
        message = errors.get_error_message(exc)
        store.fail(session_id, message)
        log.error("Batch stream failed", {"error": message})
        yield sse_helpers.format_error_event(message)
        return
    finally:
        # A client disconnect closes the generator; abandon unfinished work.
        for task in tasks:
            if not task.done():
                task.cancel()

    record = store.complete(session_id, _summarize(results))
    if record.summary is not None:
        yield sse_helpers.format_dashboard_event(record.summary)
    yield sse_helpers.format_complete_event(record)
