"""Bounded polling of a Transcribe job until it completes, fails or times out."""
from __future__ import annotations

import logging
import time
from typing import Callable

from transcribe_proxy.errors import JobFailedError, ResultParseError, TranscriptionTimeoutError
from transcribe_proxy.models import JobSnapshot, JobStatus, PollState, TranscriptionResult

logger = logging.getLogger(__name__)

MAX_WAIT_SECONDS = 90
POLL_INTERVAL_SECONDS = 3


class JobPoller:
    """
    Drives one job through SUBMITTED -> POLLING -> COMPLETED/FAILED/TIMED_OUT.

    A single elapsed counter bounds the total sleep at MAX_WAIT_SECONDS, so at
    most MAX_WAIT_SECONDS / POLL_INTERVAL_SECONDS status checks are made.
    """

    def __init__(
        self,
        get_status: Callable[[str], JobSnapshot],
        fetch_result: Callable[[str], TranscriptionResult],
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._get_status = get_status
        self._fetch_result = fetch_result
        self._sleep = sleep
        self.state = PollState.SUBMITTED
        self.checks = 0

    def wait(self, job_name: str) -> TranscriptionResult:
        waited = 0
        while waited < MAX_WAIT_SECONDS:
            self.state = PollState.POLLING
            snapshot = self._get_status(job_name)
            self.checks += 1
            logger.debug("Job %s status: %s (waited %ss)", job_name, snapshot.status.name, waited)

            if snapshot.status is JobStatus.COMPLETED:
                self.state = PollState.COMPLETED
                if not snapshot.result_uri:
                    raise ResultParseError(f"Job {job_name} completed without a transcript uri")
                return self._fetch_result(snapshot.result_uri)
            if snapshot.status is JobStatus.FAILED:
                self.state = PollState.FAILED
                raise JobFailedError(snapshot.failure_reason or "unknown reason")

            self._sleep(POLL_INTERVAL_SECONDS)
            waited += POLL_INTERVAL_SECONDS

        self.state = PollState.TIMED_OUT
        raise TranscriptionTimeoutError(MAX_WAIT_SECONDS)
