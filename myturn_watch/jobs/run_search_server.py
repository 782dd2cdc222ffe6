"""HTTP entrypoint that triggers search runs (Cloud Run / scheduler friendly)."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict

from flask import Flask, jsonify, request

from myturn_watch.core.config import ConfigError, get_settings
from myturn_watch.jobs.run_search import run_search_job

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
# One run at a time so two triggers never tweet the same sites concurrently.
_executor = ThreadPoolExecutor(max_workers=1)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; does not touch the search endpoint."""
    try:
        settings = get_settings()
    except ConfigError as exc:
        return jsonify({"status": "error", "error": str(exc)}), 503
    return (
        jsonify(
            {
                "status": "ok",
                "dataset_path": settings.dataset_path,
                "query_workers": settings.query_workers,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/run")
def enqueue_run() -> Any:
    """
    Queue one full search-and-publish run.
    Optional JSON fields: dry_run (bool)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    dry_run = payload.get("dry_run", False)
    if not isinstance(dry_run, bool):
        return jsonify({"error": "dry_run must be a boolean"}), 400

    job_args = dict(dry_run=dry_run)
    logger.info("Queueing search run: %s", job_args)
    _executor.submit(_run_job_safe, job_args)

    return jsonify({"data": {"status": "queued"}}), 202


# ---------- Internals ----------


def _run_job_safe(job_args: Dict[str, Any]) -> None:
    try:
        stats = run_search_job(get_settings(), **job_args)
        logger.info("Search run finished: %s", stats)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Search run failed: %s", exc)


def main() -> None:
    # Fails here, before binding, when credentials are incomplete.
    settings = get_settings()
    port = settings.worker_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
