"""Background scheduler for periodic polling jobs."""
import logging
import threading
import schedule
import time

logger = logging.getLogger("mtmonitor.scheduler")


class PollingScheduler:
    def __init__(self, job, interval_seconds=60, name="poll"):
        self.job = job
        self.interval = interval_seconds
        self.name = name
        self._scheduler = schedule.Scheduler()
        self._thread = None
        self._stop = threading.Event()
        self._consecutive_failures = 0

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Run the job now, then every ``interval`` seconds on a daemon thread."""
        if self.running:
            return
        self._stop.clear()
        self._scheduler.clear()
        self._scheduler.every(self.interval).seconds.do(self._run_job)

        self._thread = threading.Thread(target=self._run_loop, name=f"{self.name}-scheduler", daemon=True)
        self._thread.start()
        logger.info(f"Scheduler '{self.name}' started (every {self.interval}s)")

    def stop(self):
        self._stop.set()
        self._scheduler.clear()
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None
        logger.info(f"Scheduler '{self.name}' stopped")

    def _run_loop(self):
        self._run_job()
        while not self._stop.is_set():
            self._scheduler.run_pending()
            self._stop.wait(1)

    def _run_job(self):
        try:
            self.job()
            self._consecutive_failures = 0
        except Exception as e:
            self._consecutive_failures += 1
            logger.error(f"Job '{self.name}' failed ({self._consecutive_failures} consecutive): {e}")
            if self._consecutive_failures >= 5:
                logger.critical(f"5+ consecutive failures in '{self.name}'!")
