"""
Test suite for database connection helpers.

System role: Verification of engine and session factory construction
"""

from unittest.mock import patch

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from docchat.configs import DatabaseSettings, Settings

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


class TestConnection:
    """Test suite for engine, session factory and session generator."""

    @pytest.mark.asyncio
    async def test_get_async_engine_should_connect_to_url_override(self) -> None:
        """Test the engine honours the URL override."""
        # Arrange
        engine = get_async_engine(DatabaseSettings(url=SQLITE_URL))

        # Act
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))

        # Assert
        assert result.scalar_one() == 1
        assert engine.dialect.name == "sqlite"
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_session_factory_should_not_expire_on_commit(self) -> None:
        """Test sessions keep loaded state after commit."""
        # Arrange
        engine = get_async_engine(DatabaseSettings(url=SQLITE_URL))

        # Act
        factory = get_async_session_factory(engine)

        # Assert
        assert factory.kw["expire_on_commit"] is False
        assert factory.kw["autoflush"] is False
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_get_async_db_should_yield_session(self) -> None:
        """Test the generator yields a usable session from global settings."""
        # Arrange
        settings = Settings(database=DatabaseSettings(url=SQLITE_URL))

        # Act
        with patch("docchat.boundary.db.connection.get_settings", return_value=settings):
            async for session in get_async_db():
                value = (await session.execute(text("SELECT 1"))).scalar_one()

                # Assert
                assert isinstance(session, AsyncSession)
                assert value == 1
