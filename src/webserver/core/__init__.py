"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking and concurrency plumbing under WebServer:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Binds and listens at construction                                 │
    │  • Runs the accept() loop on the calling thread                      │
    │  • Wraps each client socket in a Connection                          │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ one job per connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    │  • Fixed number of worker threads                                    │
    │  • One shared queue, each job runs on exactly one worker            │
    │  • shutdown() drains the queue and joins the workers                 │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ worker runs the job
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • One read, one write, close                                        │
    │  • OSError surfaces as WebServerIOError                              │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer, parse_address
from .thread_pool import Job, ThreadPool, Worker, WorkerState

__all__ = [
    "SocketServer",     # Listening socket + accept loop
    "parse_address",    # "host:port" → (host, port)
    "Connection",       # Accepted client socket
    "ConnectionState",  # Connection lifecycle states
    "ThreadPool",       # Fixed set of worker threads
    "Worker",           # One worker thread
    "WorkerState",      # IDLE / RUNNING / TERMINATED
    "Job",              # Type of what the pool runs
]
