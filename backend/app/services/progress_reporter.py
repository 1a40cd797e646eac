"""
Progress intake from the provisioning backend
"""
from typing import Optional
import logging
from app.models.jobs import Job, ProgressEvent
from app.services.job_registry import JobNotFound, JobRegistry, job_registry
from app.services.completion_detector import CompletionDetector, completion_detector

logger = logging.getLogger(__name__)


class ProgressReporter:
    """
    Forwards backend progress events into the registry.

    Bursts collapse naturally: the registry keeps a single snapshot per job
    and every event overwrites it, so no history is queued.
    """

    def __init__(self, registry: JobRegistry, detector: CompletionDetector):
        self._registry = registry
        self._detector = detector
        self._dropped = 0

    def report(self, event: ProgressEvent) -> Optional[Job]:
        """
        Apply one event. Returns the job snapshot after the update, or None
        when the job is unknown and the event was dropped.
        """
        try:
            if event.error:
                return self._detector.report_error(event.job_id, event.error)
            return self._registry.update_progress(event.job_id, event.percent, event.message)
        except JobNotFound:
            self._dropped += 1
            logger.warning(f"Dropped progress event for unknown job {event.job_id} (percent={event.percent})")
            return None

    def dropped_count(self) -> int:
        """Number of events dropped for unknown jobs"""
        return self._dropped


# Global instance
progress_reporter = ProgressReporter(job_registry, completion_detector)
