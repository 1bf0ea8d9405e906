import os
import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

from app.config.settings import Settings
from app.database.connection import close_pool, get_connection, init_pool

_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    id uuid PRIMARY KEY,
    user_id text NOT NULL,
    file_name text NOT NULL,
    file_url text NOT NULL,
    status text NOT NULL DEFAULT 'pending',
    upload_date timestamptz NOT NULL DEFAULT now(),
    processed_at timestamptz,
    error_message text,
    analysis_results jsonb
)
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "statements_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest_asyncio.fixture
async def integration_pool(test_settings: Settings) -> AsyncGenerator[None, None]:
    try:
        await init_pool(test_settings)
        async with get_connection() as conn:
            await conn.execute(_SCHEMA)
            await conn.commit()
    except Exception as e:
        await close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        await close_pool()


@pytest.fixture
def owner_id() -> str:
    return f"it-{uuid.uuid4()}"


@pytest_asyncio.fixture
async def cleanup_owner(integration_pool: None, owner_id: str) -> AsyncGenerator[str, None]:
    yield owner_id
    async with get_connection() as conn:
        await conn.execute("DELETE FROM documents WHERE user_id = %s", (owner_id,))
        await conn.commit()


@pytest_asyncio.fixture
async def seed_done_document(cleanup_owner: str) -> str:
    """Insert a processed document as the analyzer would leave it."""
    document_id = str(uuid.uuid4())
    async with get_connection() as conn:
        await conn.execute(
            """
            INSERT INTO documents
            (id, user_id, file_name, file_url, status, upload_date,
             processed_at, analysis_results)
            VALUES (%s::uuid, %s, %s, %s, 'done', %s, %s, %s::jsonb)
            """,
            (
                document_id,
                cleanup_owner,
                "january.csv",
                f"{cleanup_owner}/{document_id}.csv",
                datetime.now(UTC) - timedelta(days=30),
                datetime.now(UTC) - timedelta(days=30),
                '{"total_records": 12, "mismatch_count": 0, "mismatch_rate": 0, "mismatches": []}',
            ),
        )
        await conn.commit()
    return document_id
