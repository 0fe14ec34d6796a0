from pathlib import Path
import os
import sys

import pytest

# Ensure the repository root is importable so "backend.portfolio" resolves without an install
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Test configuration

A shared in-memory SQLite database (URI form with mode=memory & cache=shared)
lets every SQLAlchemy connection see the same schema and rows during the run.
Outbound metadata lookups are disabled; tests that need them patch
backend.portfolio.utils.metadata or hand in an httpx.MockTransport client.
"""
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///file:portfolio_testdb?mode=memory&cache=shared&uri=true",
)
os.environ.setdefault("METADATA_FETCH_DISABLED", "1")


@pytest.fixture(scope="session", autouse=True)
async def _app_lifespan():
    """Run the FastAPI lifespan once per session (creates tables, initializes service state)."""
    from backend.portfolio.main import app

    async with app.router.lifespan_context(app):
        yield
