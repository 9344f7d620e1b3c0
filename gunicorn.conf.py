"""
Gunicorn Configuration

Uvicorn workers behind Gunicorn. With STORE_BACKEND=memory each worker
holds its own report, so run a single worker in that mode.
"""

import multiprocessing
import os

bind = os.getenv("BIND", "0.0.0.0:8000")

if os.getenv("STORE_BACKEND", "redis") == "memory":
    workers = 1
else:
    workers = int(os.getenv("WORKERS", multiprocessing.cpu_count() + 1))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 5000
max_requests_jitter = 500
# PDF extraction runs in the worker threadpool
timeout = 60
graceful_timeout = 30
keepalive = 5

proc_name = "sales-dashboard-api"

errorlog = "-"
accesslog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def when_ready(server):
    server.log.info("Sales dashboard API ready on %s with %s workers", bind, workers)
