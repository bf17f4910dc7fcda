"""Service for cleanup operations."""
import logging
import threading
import time
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from quizflow.config import ABANDONED_RUN_RETENTION_DAYS, CLEANUP_INTERVAL_SECONDS
from quizflow.database import SessionLocal
from quizflow.models.db.response import Response, ResponseAnswer, RunStatus
from quizflow.services.auth_service import cleanup_expired_sessions
from quizflow.services.editor_service import DraftStore

logger = logging.getLogger(__name__)


def cleanup_abandoned_runs(db, retention_days: int = ABANDONED_RUN_RETENTION_DAYS) -> int:
    """Remove runs left in progress for longer than the retention period."""
    if retention_days <= 0:
        return 0

    cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
    stale = select(Response.id).where(
        Response.status == RunStatus.IN_PROGRESS.value,
        Response.started_at < cutoff,
    )
    # Bulk deletes skip ORM cascades; answers go first
    db.execute(
        delete(ResponseAnswer)
        .where(ResponseAnswer.response_id.in_(stale))
        .execution_options(synchronize_session=False)
    )
    result = db.execute(
        delete(Response)
        .where(Response.id.in_(stale))
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount


def run_cleanup(drafts: DraftStore | None = None) -> dict[str, int]:
    """Run every cleanup task once and return how much each removed."""
    counts = {"runs": 0, "sessions": 0, "drafts": 0}
    if drafts is not None:
        counts["drafts"] = drafts.purge_expired()

    db = SessionLocal()
    try:
        counts["runs"] = cleanup_abandoned_runs(db)
        counts["sessions"] = cleanup_expired_sessions(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Cleanup failed: {e}")
    finally:
        db.close()

    if any(counts.values()):
        logger.info(
            f"Cleaned up {counts['runs']} abandoned runs, "
            f"{counts['sessions']} expired sessions, {counts['drafts']} idle drafts"
        )
    return counts


def schedule_cleanup(drafts: DraftStore | None = None) -> threading.Thread:
    """Start the periodic cleanup worker."""

    def _worker() -> None:
        # Initial delay before first cleanup
        time.sleep(60)
        while True:
            run_cleanup(drafts)
            time.sleep(CLEANUP_INTERVAL_SECONDS)

    thread = threading.Thread(
        target=_worker,
        name="quizflow_cleanup",
        daemon=True,
    )
    thread.start()
    return thread
