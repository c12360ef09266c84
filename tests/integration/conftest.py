from __future__ import annotations

import pytest

from draw_engine.core.integration_db_safety import assert_safe_integration_db
from draw_engine.db.models import Base
from draw_engine.db.session import engine


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    assert_safe_integration_db(str(engine.url))


@pytest.fixture(autouse=True)
async def reset_schema() -> None:
    # Dispose pooled connections between tests to avoid cross-event-loop reuse.
    await engine.dispose()

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    except OSError as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Test database is not reachable: {exc}")

    yield

    await engine.dispose()
