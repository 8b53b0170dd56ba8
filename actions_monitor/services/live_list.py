"""Live, ordered job list kept in sync with the latest jobs snapshot.

``SingleValueModel`` holds the most recent :class:`JobsList`. Replacing the
value notifies listeners synchronously while the model lock is held, so a
listener only ever sees a whole snapshot. :class:`LiveJobList` listens to
the model and rebuilds its working list on every push. :class:`JobsRefresher`
is the only writer: it pushes a snapshot only when a fetch succeeds and
drops a response only when a newer refresh has already published one.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import threading
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

import httpx

from .github_errors import GitHubAPIError
from .github_models import Job, JobsList
from .job_ordering import sort_jobs

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[], None]


class SingleValueModel(Generic[T]):
    """Single-slot observable value with synchronous notify-on-replace."""

    def __init__(self, value: T | None = None) -> None:
        self._value = value
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()

    @property
    def value(self) -> T | None:
        return self._value

    def set_value(self, value: T | None) -> None:
        with self._lock:
            self._value = value
            for listener in list(self._listeners):
                listener()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove


class ListState(str, enum.Enum):
    EMPTY = "empty"
    POPULATED = "populated"


class CopyCapability:
    """Copy/export support for the job list. Not supported."""

    supported = False

    def is_copy_enabled(self) -> bool:
        return False

    def is_copy_visible(self) -> bool:
        return False

    def perform_copy(self) -> None:
        raise NotImplementedError("Copying jobs is not supported")


class LiveJobList:
    """Display collection of jobs rebuilt from each pushed snapshot."""

    def __init__(self, model: SingleValueModel[JobsList] | None = None) -> None:
        self.model: SingleValueModel[JobsList] = model or SingleValueModel()
        self.copy_provider = CopyCapability()
        self._jobs: list[Job] = []
        self._state = ListState.EMPTY
        self._selected_id: int | None = None
        self._lock = threading.RLock()

        self._unsubscribe = self.model.add_listener(self._on_snapshot)
        if self.model.value is not None:
            self.reconcile(self.model.value)

    def _on_snapshot(self) -> None:
        snapshot = self.model.value
        if snapshot is None:
            # No revert to EMPTY; keep what is shown.
            return
        self.reconcile(snapshot)

    def reconcile(self, snapshot: JobsList) -> None:
        """Replace the working list with ``snapshot.jobs`` in display order.

        A job id appears at most once; if a snapshot repeats an id, the last
        occurrence wins.
        """
        latest: dict[int, Job] = {}
        for job in snapshot.jobs:
            latest[job.id] = job

        with self._lock:
            self._jobs.clear()
            self._jobs.extend(sort_jobs(latest.values()))
            self._state = ListState.POPULATED

        logger.debug("Reconciled job list", extra={"jobs": len(latest), "total_count": snapshot.total_count})

    def close(self) -> None:
        self._unsubscribe()

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def jobs(self) -> tuple[Job, ...]:
        with self._lock:
            return tuple(self._jobs)

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(self.jobs)

    def find(self, job_id: int) -> Job | None:
        with self._lock:
            for job in self._jobs:
                if job.id == job_id:
                    return job
        return None

    def select(self, job_id: int) -> Job | None:
        """Select the job with ``job_id``; returns ``None`` and keeps the old selection if absent."""
        job = self.find(job_id)
        if job is not None:
            self._selected_id = job_id
        return job

    def clear_selection(self) -> None:
        self._selected_id = None

    def selected_job(self) -> Job | None:
        if self._selected_id is None:
            return None
        return self.find(self._selected_id)


JobsFetcher = Callable[[str], Awaitable[JobsList]]


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of one :meth:`JobsRefresher.refresh` call."""

    updated: bool
    error: Exception | None = None
    stale: bool = False


class JobsRefresher:
    """Fetches job snapshots and pushes successful ones into a model.

    Each refresh gets a generation number. A successful response is
    published unless a refresh that started later has already published
    its own, so a failing newer refresh never hides an older success.
    """

    def __init__(self, model: SingleValueModel[JobsList], fetch: JobsFetcher) -> None:
        self.model = model
        self._fetch = fetch
        self._generation = 0
        self._published_generation = 0
        self._poll_task: asyncio.Task[None] | None = None
        self._poll_stop: asyncio.Event | None = None

    async def refresh(self, jobs_url: str) -> RefreshResult:
        """Fetch ``jobs_url`` and publish the result.

        A failed fetch leaves the model alone and carries its error in the
        returned :class:`RefreshResult`.
        """
        self._generation += 1
        generation = self._generation
        try:
            snapshot = await self._fetch(jobs_url)
        except (GitHubAPIError, httpx.HTTPError) as exc:
            logger.warning(
                "Failed to refresh jobs, keeping last snapshot",
                extra={"url": jobs_url, "error": str(exc)},
            )
            return RefreshResult(updated=False, error=exc)

        if generation < self._published_generation:
            logger.debug("Discarding stale jobs response", extra={"url": jobs_url, "generation": generation})
            return RefreshResult(updated=False, stale=True)

        self._published_generation = generation
        self.model.set_value(snapshot)
        return RefreshResult(updated=True)

    async def poll(self, jobs_url: str, interval: float, stop: asyncio.Event) -> None:
        """Refresh every ``interval`` seconds until ``stop`` is set."""
        while not stop.is_set():
            await self.refresh(jobs_url)
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def start_polling(self, jobs_url: str, interval: float) -> None:
        """Start a background :meth:`poll` loop, replacing any running one."""
        await self.stop_polling()
        self._poll_stop = asyncio.Event()
        self._poll_task = asyncio.create_task(self.poll(jobs_url, interval, self._poll_stop))
        logger.info("Started polling jobs", extra={"url": jobs_url, "interval": interval})

    async def stop_polling(self) -> None:
        """Stop the background poll loop and wait for it to finish."""
        task, stop = self._poll_task, self._poll_stop
        self._poll_task = None
        self._poll_stop = None
        if task is None or stop is None:
            return
        stop.set()
        await task
        logger.info("Stopped polling jobs")
