"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, deterministic settings, fake model clients,
sample documents and conversations
Dependencies: pytest, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import uuid

import pytest

from docchat.configs import MemorySettings, PipelineSettings, UploadSettings
from docchat.configs.uploads import MIB


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from docchat.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def upload_settings(tmp_path) -> UploadSettings:
    """Upload settings staging parts under a temporary directory."""
    return UploadSettings(temp_dir=str(tmp_path / "temp-uploads"), max_file_size=512 * MIB)


@pytest.fixture
def upload_manager(upload_settings):
    """Upload session manager over the temporary staging directory."""
    from docchat.core.uploads.session_store import UploadSessionManager

    return UploadSessionManager(upload_settings)


@pytest.fixture
def blob_store(tmp_path):
    """Local blob store rooted in a temporary directory."""
    from docchat.boundary.blob import LocalBlobStore

    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def memory_settings() -> MemorySettings:
    """Memory settings with a small compaction threshold."""
    return MemorySettings(
        max_messages_before_summary=4,
        max_history_length=6,
        recent_messages_for_context=2,
        chars_per_message_estimate=100,
        summarization_timeout_seconds=5,
        prune_after_days=30,
    )


@pytest.fixture
def pipeline_settings() -> PipelineSettings:
    """Pipeline settings with small segments and no suggestions threshold surprises."""
    return PipelineSettings(
        chunk_size=200,
        chunk_overlap=40,
        embedding_concurrency=4,
        embedding_timeout_seconds=5,
        suggestion_count=3,
        suggestion_min_chars=100,
    )


@pytest.fixture
def fake_embeddings():
    """Deterministic embeddings: identical text gives identical vectors."""
    from langchain_core.embeddings import DeterministicFakeEmbedding

    return DeterministicFakeEmbedding(size=16)


@pytest.fixture
def fake_chat_model():
    """Chat model replying with a numbered list of questions."""
    from langchain_core.language_models import FakeListChatModel

    return FakeListChatModel(
        responses=["1. What is the main topic?\n2. Who wrote it?\n3. Why does it matter?"]
    )


@pytest.fixture
def pipeline(pipeline_settings, fake_embeddings, fake_chat_model):
    """Document pipeline wired to fake model clients."""
    from docchat.core.document_processing.entrypoint import DocumentPipeline

    return DocumentPipeline(
        settings=pipeline_settings,
        embeddings=fake_embeddings,
        chat_model=fake_chat_model,
    )


@pytest.fixture
def owner_id() -> str:
    """Generate a test owner identity."""
    return f"user-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def sample_text() -> str:
    """Multi-paragraph plain text document."""
    paragraphs = [
        "Photosynthesis converts light energy into chemical energy stored in glucose. "
        "It takes place in the chloroplasts of plant cells.",
        "The light-dependent reactions occur in the thylakoid membranes and produce "
        "ATP and NADPH while releasing oxygen.",
        "The Calvin cycle uses ATP and NADPH to fix carbon dioxide into sugars "
        "inside the stroma of the chloroplast.",
        "Cellular respiration is the reverse process, releasing energy from glucose "
        "in the mitochondria.",
    ]
    return "\n\n".join(paragraphs)
