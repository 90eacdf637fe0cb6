"""
=============================================================================
THREAD POOL IMPLEMENTATION
=============================================================================

A fixed set of worker threads processing jobs from one shared queue.

=============================================================================
WHY A FIXED-SIZE POOL?
=============================================================================

Thread-per-connection:

    for connection in accept_connections():
        threading.Thread(target=handle, args=(connection,)).start()

    └─ No limit on concurrent threads → resource exhaustion under load

Fixed pool:

    pool = ThreadPool(4)
    for connection in accept_connections():
        pool.execute(partial(handle, connection))

    └─ At most 4 jobs run at once, the rest wait in the queue
    └─ Threads are created once and reused

The worker count is fixed for the lifetime of the pool. There is no
scaling up or down.

=============================================================================
THREAD POOL ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        Thread Pool                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   execute(job)                                                       │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────┐                       │
    │   │  queue.Queue  [job][job][job]...         │  one shared queue     │
    │   └─────────────────────────────────────────┘                       │
    │        │            │            │                                   │
    │        ▼            ▼            ▼                                   │
    │   ┌─────────┐  ┌─────────┐  ┌─────────┐                             │
    │   │Worker-0 │  │Worker-1 │  │Worker-2 │   each job goes to exactly  │
    │   └─────────┘  └─────────┘  └─────────┘   ONE worker                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

queue.Queue does the locking. Jobs leave the queue in submission order;
they may FINISH in any order since workers run independently.

=============================================================================
WORKER STATE MACHINE
=============================================================================

    IDLE ──get job──► RUNNING ──job returns or raises──► IDLE
      │
      └──get sentinel──► TERMINATED   (absorbing)

=============================================================================
SHUTDOWN (POISON PILLS)
=============================================================================

    pool.shutdown()
        └─ refuse new jobs (execute() raises RuntimeError)
        └─ for each worker: queue.put(None)
        └─ join every worker

Sentinels queue up BEHIND the jobs already submitted, so every job that
was accepted runs before its worker sees the sentinel. Nothing is
abandoned mid-flight.

=============================================================================
FAILURE SEMANTICS
=============================================================================

A job raising Exception is logged and counted, and the worker goes back to
IDLE. A job raising something outside Exception (SystemExit,
KeyboardInterrupt) is logged at CRITICAL and ends that worker's thread.
Dead workers are not replaced: the pool keeps running with fewer threads,
and stats shows it.

=============================================================================
"""

import logging
import queue
import threading
import time
from enum import Enum
from typing import Callable, Optional


logger = logging.getLogger(__name__)


Job = Callable[[], None]


class WorkerState(Enum):
    """
    Worker thread states.

    Used for monitoring and debugging the thread pool.
    """
    IDLE = "idle"              # Waiting for a job
    RUNNING = "running"        # Executing a job
    TERMINATED = "terminated"  # Thread exited


class Worker(threading.Thread):
    """
    Worker thread that runs jobs from the shared queue.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        Worker Loop                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Wait for a job from the queue (blocking, no timeout)           │
    │          │                                                           │
    │          ├── None (sentinel) → exit loop, TERMINATED                │
    │          │                                                           │
    │   2. Run it                                                          │
    │          │                                                           │
    │          └── Exception → log it, keep going                         │
    │                                                                      │
    │   3. Back to step 1                                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(self, job_queue: "queue.Queue[Optional[Job]]", worker_id: int):
        # daemon=True: a process exiting without shutdown() is not held open
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.job_queue = job_queue
        self.worker_id = worker_id
        self.state = WorkerState.IDLE

        # Metrics
        self.jobs_completed = 0
        self.jobs_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        try:
            while True:
                job = self.job_queue.get()
                try:
                    if job is None:
                        break
                    self._run_job(job)
                finally:
                    self.job_queue.task_done()
        except BaseException as e:
            # Only non-Exception errors reach here; _run_job contains the rest
            self.jobs_failed += 1
            logger.critical(
                f"Worker {self.worker_id} terminated by {type(e).__name__}: {e}"
            )
        finally:
            self.state = WorkerState.TERMINATED
            logger.debug(f"Worker {self.worker_id} stopped")

    def _run_job(self, job: Job):
        """
        Run a single job.

        Job-level success or failure is the job's own business. The worker
        only makes sure an exception does not take the thread down with it.
        """
        self.state = WorkerState.RUNNING
        start_time = time.monotonic()

        try:
            job()
        except Exception as e:
            elapsed = time.monotonic() - start_time
            logger.exception(
                f"Worker {self.worker_id} job failed after {elapsed:.3f}s: {e}"
            )
            self.jobs_failed += 1
        else:
            elapsed = time.monotonic() - start_time
            logger.debug(f"Worker {self.worker_id} completed job in {elapsed:.3f}s")
            self.jobs_completed += 1
        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Fixed-size thread pool.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      ThreadPool Usage                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   pool = ThreadPool(4)          # 4 workers, started immediately    │
    │                                                                      │
    │   pool.execute(job)             # returns at once                   │
    │   pool.execute(partial(handle, conn))                               │
    │                                                                      │
    │   print(pool.stats)             # {"workers": {...}, "jobs": {...}} │
    │                                                                      │
    │   pool.shutdown()               # runs what is queued, joins all    │
    │                                                                      │
    │   with ThreadPool(4) as pool:   # or let the context manager do it  │
    │       ...                                                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(self, worker_count: int):
        """
        Create the queue and start worker_count workers.

        Raises:
            ValueError: worker_count is less than 1. A pool without workers
                        would accept jobs and never run them.
        """
        if worker_count < 1:
            raise ValueError(f"worker_count must be >= 1, got {worker_count}")

        self._worker_count = worker_count

        # Unbounded: execute() never waits for queue space
        self._job_queue: "queue.Queue[Optional[Job]]" = queue.Queue()

        # Serializes execute() against shutdown() so no job can be queued
        # behind the sentinels
        self._lock = threading.Lock()
        self._closed = False

        logger.info(f"Starting thread pool with {worker_count} workers")
        self._workers = [Worker(self._job_queue, i) for i in range(worker_count)]
        for worker in self._workers:
            worker.start()

    def execute(self, job: Job) -> None:
        """
        Queue a job and return immediately.

        The pool never looks at what the job returns or raises.

        Raises:
            RuntimeError: The pool has been shut down.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Thread pool is shut down")
            self._job_queue.put(job)

    def shutdown(self) -> None:
        """
        Stop accepting jobs, let queued jobs finish, join every worker.

        Blocks for as long as the slowest in-flight job takes. Safe to call
        more than once.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            logger.info("Shutting down thread pool...")
            for _ in self._workers:
                self._job_queue.put(None)

        for worker in self._workers:
            worker.join()

        logger.info("Thread pool shutdown complete")

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False

    # =========================================================================
    # MONITORING: Check pool status
    # =========================================================================

    @property
    def is_shutdown(self) -> bool:
        return self._closed

    @property
    def worker_count(self) -> int:
        """Number of workers the pool was created with."""
        return self._worker_count

    @property
    def alive_workers(self) -> int:
        """Workers that have not terminated."""
        return sum(1 for w in self._workers if w.state != WorkerState.TERMINATED)

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.RUNNING)

    @property
    def idle_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.IDLE)

    @property
    def queued_jobs(self) -> int:
        """Approximate number of jobs waiting for a worker."""
        return self._job_queue.qsize()

    @property
    def stats(self) -> dict:
        """
        Pool statistics.

        Returns a dict with worker and job counts, useful for logging and
        tests.
        """
        return {
            "workers": {
                "total": self._worker_count,
                "alive": self.alive_workers,
                "busy": self.busy_workers,
                "idle": self.idle_workers,
            },
            "jobs": {
                "queued": self.queued_jobs,
                "completed": sum(w.jobs_completed for w in self._workers),
                "failed": sum(w.jobs_failed for w in self._workers),
            },
        }
