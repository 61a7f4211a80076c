# progress.py
# Terminal progress view for a running generation job

import logging
import sys
import time
from typing import Callable, Optional

import requests

from product_media import config

logger = logging.getLogger(__name__)

PROCESSING = "processing"
COMPLETED = "completed"
FAILED = "failed"
TERMINAL_STATES = (COMPLETED, FAILED)

# Simulated progress never reaches 100 on its own
SIMULATED_CAP = 95

ELAPSED_STEPS = [
    (15, "Initializing AI systems..."),
    (45, "Analyzing product details..."),
    (120, "Generating AI image..."),
    (240, "Creating AI video..."),
]
FINAL_STEP = "Processing final results..."

# Consecutive unusable poll responses before watch_job stops
MAX_FAILED_POLLS = 20


def step_for_elapsed(elapsed: float) -> str:
    for limit, label in ELAPSED_STEPS:
        if elapsed < limit:
            return label
    return FINAL_STEP


class ProgressTracker:
    """
    Client-side job state: processing -> completed | failed.

    While processing, the displayed percentage advances with wall-clock time
    so a long generation does not look stalled. A progress value reported by
    the server (pull path) is shown instead when it is higher. Once a terminal
    status arrives the tracker stops changing.
    """

    def __init__(self, job_id: str, estimated_seconds: Optional[int] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.job_id = job_id
        self.estimated_seconds = estimated_seconds or config.ESTIMATED_GENERATION_SECONDS
        self._clock = clock
        self.started_at = clock()
        self.state = PROCESSING
        self.server_progress: Optional[int] = None
        self.server_message: Optional[str] = None
        self.data: Optional[dict] = None
        self.error: Optional[str] = None

    @property
    def elapsed(self) -> float:
        return self._clock() - self.started_at

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def progress(self) -> int:
        if self.state == COMPLETED:
            return 100
        simulated = round(min(self.elapsed / self.estimated_seconds * 100, SIMULATED_CAP))
        if self.server_progress is not None:
            return max(simulated, self.server_progress)
        return simulated

    @property
    def message(self) -> str:
        if self.state == COMPLETED:
            return "Generation complete!"
        if self.state == FAILED:
            return f"Generation failed: {self.error or 'unknown error'}"
        return self.server_message or step_for_elapsed(self.elapsed)

    def update(self, payload: dict) -> str:
        """Apply one poll response; returns the resulting state."""
        if self.done or not isinstance(payload, dict):
            return self.state
        status = payload.get("status")
        if status == COMPLETED:
            self.state = COMPLETED
            self.data = payload.get("data")
        elif status == FAILED:
            self.state = FAILED
            self.error = payload.get("error")
        else:
            if isinstance(payload.get("progress"), (int, float)):
                self.server_progress = int(payload["progress"])
            if payload.get("message"):
                self.server_message = payload["message"]
        return self.state


def render(tracker: ProgressTracker, width: int = 30) -> str:
    filled = int(width * tracker.progress / 100)
    bar = "#" * filled + "-" * (width - filled)
    minutes, seconds = divmod(int(tracker.elapsed), 60)
    return f"[{bar}] {tracker.progress:3d}% {minutes}:{seconds:02d}  {tracker.message}"


def poll_once(job_id: str, status_url: str, tracker: ProgressTracker) -> bool:
    """One status request fed to the tracker; False when nothing usable came back."""
    try:
        response = requests.get(status_url, timeout=config.HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        logger.warning("Status poll for %s failed: %s", job_id, e)
        return False
    if not response.ok:
        logger.warning("Status poll for %s returned HTTP %s: %s", job_id, response.status_code, response.text[:200])
    try:
        payload = response.json()
    except ValueError:
        logger.warning("Status poll for %s returned a body that is not JSON", job_id)
        return False
    if not isinstance(payload, dict) or "status" not in payload:
        logger.warning("Status poll for %s returned no job status: %s", job_id, str(payload)[:200])
        return False
    # Error responses still carry the failed status in the uniform shape
    tracker.update(payload)
    return response.ok or tracker.done


def watch_job(job_id: str, status_url: str, interval: Optional[float] = None,
              timeout: Optional[float] = None, out=None,
              sleep: Callable[[float], None] = time.sleep,
              tracker: Optional[ProgressTracker] = None,
              max_failed_polls: Optional[int] = MAX_FAILED_POLLS) -> ProgressTracker:
    """
    Poll status_url until the job reaches a terminal state (or timeout
    elapses) and redraw a one-line progress bar on each tick.
    """
    interval = interval or config.POLL_INTERVAL_SECONDS
    out = out or sys.stdout
    tracker = tracker or ProgressTracker(job_id)
    failed_polls = 0

    while not tracker.done:
        if poll_once(job_id, status_url, tracker):
            failed_polls = 0
        else:
            failed_polls += 1

        out.write("\r" + render(tracker))
        out.flush()
        if tracker.done or (timeout is not None and tracker.elapsed >= timeout):
            break
        if max_failed_polls and failed_polls >= max_failed_polls:
            logger.error("Giving up on %s after %s failed polls", job_id, failed_polls)
            break
        sleep(interval)

    out.write("\n")
    return tracker
