"""Background polling of cgroup reports for the live view."""

import threading
from queue import Queue

from loguru import logger

from cgroupinfo.inspector import CgroupInspector
from cgroupinfo.models import Report


class ReportMonitor:
    """
    Re-runs a CgroupInspector in a daemon thread and pushes reports to a Queue.

    Each report takes at least one sampling interval to build; ``poll_rate`` is
    the pause between the end of one report and the start of the next.
    """

    def __init__(
        self,
        update_queue: Queue[Report],
        inspector: CgroupInspector | None = None,
        poll_rate: float = 1.0,
    ) -> None:
        """
        Initialize the ReportMonitor.

        Args:
            update_queue: Thread-safe queue to push reports to.
            inspector: Report builder. Defaults to the live system.
            poll_rate: Pause between reports (in seconds). Default 1.0s.
        """
        self._queue = update_queue
        self._inspector = inspector or CgroupInspector()
        self._poll_rate = poll_rate
        self._stop_event = threading.Event()
        self._refresh_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def poll_rate(self) -> float:
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        self._poll_rate = max(0.1, value)  # Minimum 0.1 seconds

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the polling thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="ReportMonitor",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the polling thread.

        A report in progress still runs its sampling interval to completion.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        self._refresh_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def refresh(self) -> None:
        """Cut the current pause short and build the next report now."""
        self._refresh_event.set()

    def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._queue.put(self._inspector.inspect())
            except Exception:
                logger.exception("Unexpected error while building cgroup report")

            self._refresh_event.wait(timeout=self._poll_rate)
            self._refresh_event.clear()
