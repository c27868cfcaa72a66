"""
Pytest configuration and shared fixtures for Productivity MCP Server tests

- Pure engine, service and handler tests need no database
- db_connection gives each integration test a fresh database loaded from
  schema.sql, and skips when no PostgreSQL server is reachable
"""

import os
import pytest
from pathlib import Path
import sys
import asyncpg

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault('APP_ENV', 'test')

from database import DatabaseConnection
from config import DatabaseConfig
from container import RepositoryContainer
from tests.test_config import TEST_DB_CONFIG, SCHEMA_FILE
from tests.test_fixtures import SampleDataFactory


def pytest_configure(config):
    """
    Pytest hook called before test collection.
    """
    os.environ['PYTEST_RUNNING'] = '1'
    # Never call a real LLM from tests
    os.environ['RECOMMENDATIONS_ENABLED'] = 'false'


async def _system_connection():
    return await asyncpg.connect(
        host=TEST_DB_CONFIG['host'],
        port=TEST_DB_CONFIG['port'],
        user=TEST_DB_CONFIG['user'],
        password=TEST_DB_CONFIG['password'],
        database='postgres',
        ssl='prefer'
    )


async def _create_test_database():
    """Create test database"""
    sys_conn = await _system_connection()
    try:
        await sys_conn.execute(f'DROP DATABASE IF EXISTS {TEST_DB_CONFIG["database"]}')
        await sys_conn.execute(f'CREATE DATABASE {TEST_DB_CONFIG["database"]}')
    finally:
        await sys_conn.close()


async def _setup_schema():
    """Load schema into test database"""
    conn = await asyncpg.connect(
        host=TEST_DB_CONFIG['host'],
        port=TEST_DB_CONFIG['port'],
        user=TEST_DB_CONFIG['user'],
        password=TEST_DB_CONFIG['password'],
        database=TEST_DB_CONFIG['database'],
        ssl='prefer'
    )
    try:
        await conn.execute(SCHEMA_FILE.read_text(encoding='utf-8'))
    finally:
        await conn.close()


async def _drop_test_database():
    """Drop the test database"""
    sys_conn = await _system_connection()
    try:
        await sys_conn.execute(f"""
            SELECT pg_terminate_backend(pg_stat_activity.pid)
            FROM pg_stat_activity
            WHERE pg_stat_activity.datname = '{TEST_DB_CONFIG["database"]}'
              AND pid <> pg_backend_pid()
        """)
        await sys_conn.execute(f'DROP DATABASE IF EXISTS {TEST_DB_CONFIG["database"]}')
    finally:
        await sys_conn.close()


@pytest.fixture(scope="function")
async def db_connection():
    """
    DatabaseConnection on a fresh test database.

    Same DatabaseConnection the server uses in production.
    """
    try:
        await _create_test_database()
    except (OSError, asyncpg.PostgresError) as e:
        pytest.skip(f"PostgreSQL not available: {e}")
    await _setup_schema()

    config = DatabaseConfig.from_environment('test')
    db = DatabaseConnection(config)
    await db.connect()

    yield db

    await db.disconnect()
    await _drop_test_database()


@pytest.fixture(scope="function")
async def sample_data(db_connection):
    """SampleDataFactory writing to the db_connection database"""
    yield SampleDataFactory(db_connection)


@pytest.fixture(scope="function")
async def repos(db_connection):
    """RepositoryContainer on the test database, with no LLM client"""
    return RepositoryContainer(db_connection)
