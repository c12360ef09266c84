from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Settings are read at import time, so the test database must be chosen first.
_TEST_DB_PATH = Path(tempfile.gettempdir()) / f"draw_engine_test_{os.getpid()}.db"
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_DB_PATH}")
os.environ.setdefault("DATABASE_POOL_TIMEOUT_SECONDS", "120")
os.environ.setdefault("DRAW_TIMEZONE", "Africa/Lagos")
os.environ.setdefault("DRAW_CUTOFF_TIME", "18:00")
os.environ.setdefault("STORE_RETRY_BACKOFF_MS", "10,30,100")


def pytest_sessionfinish(session, exitstatus) -> None:
    for suffix in ("", "-journal", "-wal", "-shm"):
        Path(f"{_TEST_DB_PATH}{suffix}").unlink(missing_ok=True)
