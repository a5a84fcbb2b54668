"""
Integration test fixtures — PostgreSQL testcontainer and schema setup.

Provides a real PostgreSQL instance for the test session via testcontainers
with a single `users` table. Each test gets a clean table via truncation.
The container only starts when a test asks for it.
"""

from __future__ import annotations

import psycopg
import pytest
from testcontainers.postgres import PostgresContainer

DDL = """
CREATE TABLE users (
    id     SERIAL PRIMARY KEY,
    name   TEXT NOT NULL,
    email  TEXT NOT NULL UNIQUE
);
"""

TRUNCATE_ALL = "TRUNCATE users RESTART IDENTITY;"


@pytest.fixture(scope="session")
def postgres_container() -> PostgresContainer:
    """Start a PostgreSQL container for the entire test session."""
    with PostgresContainer("postgres:16-alpine") as pg:
        dsn = pg.get_connection_url().replace("postgresql+psycopg2", "postgresql")
        with psycopg.connect(dsn) as conn:
            conn.execute(DDL)
            conn.commit()
        yield pg


@pytest.fixture()
def pg_connection(postgres_container: PostgresContainer) -> psycopg.Connection:
    """Return an autocommit connection on a truncated `users` table."""
    dsn = postgres_container.get_connection_url().replace("postgresql+psycopg2", "postgresql")
    with psycopg.connect(dsn, autocommit=True) as conn:
        conn.execute(TRUNCATE_ALL)
        yield conn
