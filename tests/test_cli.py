"""Tests for the command-line interface."""

import asyncio
from unittest.mock import patch

from sqlalchemy import inspect

from event_seats import cli
from event_seats.config import get_settings
from event_seats.database.connection import create_database


def test_no_command_prints_help(capsys):
    """Test running without a command shows usage."""
    assert cli.main([]) == 0
    assert "serve" in capsys.readouterr().out


def test_serve_applies_overrides():
    """Test --host and --port replace the configured values."""
    with patch.object(cli, "run", return_value=0) as run:
        assert cli.main(["serve", "--host", "127.0.0.1", "--port", "8080"]) == 0

    settings = run.call_args.args[0]
    assert settings.host == "127.0.0.1"
    assert settings.port == 8080


def test_serve_accepts_port_zero():
    """Test --port 0 asks for an ephemeral port instead of being ignored."""
    with patch.object(cli, "run", return_value=0) as run:
        cli.main(["serve", "--port", "0"])

    assert run.call_args.args[0].port == 0


def test_serve_propagates_exit_status():
    """Test a failed start becomes the process status."""
    with patch.object(cli, "run", return_value=1):
        assert cli.main(["serve"]) == 1


def test_init_db_creates_tables(monkeypatch, tmp_path):
    """Test init-db creates every table."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/seats.db")

    assert cli.main(["init-db"]) == 0

    async def table_names():
        database = create_database(get_settings())
        try:
            async with database.engine.connect() as conn:
                return await conn.run_sync(lambda c: inspect(c).get_table_names())
        finally:
            await database.dispose()

    assert set(asyncio.run(table_names())) == {"users", "events", "seats", "feedback"}


def test_init_db_unreachable(monkeypatch):
    """Test init-db fails cleanly when the database is down."""
    monkeypatch.setenv(
        "DATABASE_URL", "sqlite+aiosqlite:////nonexistent-directory/for/tests/seats.db"
    )
    assert cli.main(["init-db"]) == 1
