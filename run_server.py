#!/usr/bin/env python
"""
Server Entry Point

Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py
    Gunicorn:     python run_server.py --gunicorn
"""

import argparse
import os
import subprocess

import uvicorn

APP_PATH = "salesdash.main:app"


def run_dev_server(port: int):
    """Uvicorn with auto-reload on the package sources."""
    uvicorn.run(
        APP_PATH,
        host="127.0.0.1",
        port=port,
        reload=True,
        reload_dirs=["salesdash"],
        log_level="debug",
    )


def run_prod_server(port: int):
    uvicorn.run(
        APP_PATH,
        host="0.0.0.0",
        port=port,
        workers=int(os.getenv("WORKERS", 2)),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
    )


def run_gunicorn(port: int):
    env = dict(os.environ, BIND=f"0.0.0.0:{port}")
    subprocess.run(["gunicorn", APP_PATH, "-c", "gunicorn.conf.py"], env=env, check=True)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sales Dashboard API Server")
    parser.add_argument("--dev", action="store_true", help="Run with auto-reload")
    parser.add_argument("--gunicorn", action="store_true", help="Run under Gunicorn")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", 8000)), help="Port to listen on")
    args = parser.parse_args()

    if args.dev:
        run_dev_server(args.port)
    elif args.gunicorn:
        run_gunicorn(args.port)
    else:
        run_prod_server(args.port)
