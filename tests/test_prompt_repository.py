import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import NoResultFound
from sqlalchemy.pool import StaticPool

from prompt_admin.logging import NotFoundSignal, RepositoryError
from prompt_admin.schemas import ConfigRecord, SaveKind
from prompt_admin.services.prompt_repository import PromptRepository


pytestmark = pytest.mark.anyio

TABLE = "g2d_systemprompt"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.connect() as conn:
        conn.execute(text(f"""
            CREATE TABLE {TABLE} (
                id TEXT PRIMARY KEY DEFAULT (lower(hex(randomblob(16)))),
                prompt TEXT NOT NULL,
                prompt_sdr TEXT,
                created_by TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """))
        conn.commit()
    yield engine
    engine.dispose()


@pytest.fixture
def repo(engine):
    return PromptRepository(engine, TABLE)


def rows(engine):
    with engine.connect() as conn:
        return conn.execute(text(f"SELECT id, prompt, prompt_sdr, created_by FROM {TABLE}")).mappings().all()


def test_rejects_unsafe_table_name(engine):
    with pytest.raises(ValueError):
        PromptRepository(engine, "prompts; DROP TABLE users")


async def test_fetch_one_on_empty_table_returns_none(repo):
    assert await repo.fetch_one() is None


async def test_insert_then_fetch(repo, engine):
    kind = await repo.save(ConfigRecord(prompt_text="Hello", created_by="user-42"))

    assert kind == SaveKind.INSERTED
    stored = rows(engine)
    assert len(stored) == 1
    assert stored[0]["prompt"] == ""
    assert stored[0]["prompt_sdr"] == "Hello"
    assert stored[0]["created_by"] == "user-42"

    record = await repo.fetch_one()
    assert record.id == stored[0]["id"]
    assert record.prompt_text == "Hello"


async def test_update_touches_only_prompt_text(repo, engine):
    with engine.connect() as conn:
        conn.execute(text(f"""
            INSERT INTO {TABLE} (id, prompt, prompt_sdr, created_by)
            VALUES ('abc-123', 'legacy', 'Old', 'user-1')
        """))
        conn.commit()

    kind = await repo.save(ConfigRecord(id="abc-123", prompt_text="New", created_by="user-42"))

    assert kind == SaveKind.UPDATED
    stored = rows(engine)
    assert len(stored) == 1
    assert stored[0]["prompt_sdr"] == "New"
    assert stored[0]["prompt"] == "legacy"
    assert stored[0]["created_by"] == "user-1"


async def test_update_of_missing_id_does_not_insert(repo, engine):
    kind = await repo.save(ConfigRecord(id="missing", prompt_text="New"))

    assert kind == SaveKind.UPDATED
    assert rows(engine) == []


async def test_null_prompt_reads_as_empty(repo, engine):
    with engine.connect() as conn:
        conn.execute(text(f"INSERT INTO {TABLE} (id, prompt) VALUES ('abc-123', '')"))
        conn.commit()

    record = await repo.fetch_one()

    assert record.id == "abc-123"
    assert record.prompt_text == ""


async def test_integer_id_is_normalized(engine):
    with engine.connect() as conn:
        conn.execute(text("CREATE TABLE int_prompts (id INTEGER PRIMARY KEY, prompt TEXT, prompt_sdr TEXT)"))
        conn.execute(text("INSERT INTO int_prompts (id, prompt, prompt_sdr) VALUES (7, '', 'Hi')"))
        conn.commit()

    record = await PromptRepository(engine, "int_prompts").fetch_one()

    assert record.id == "7"


async def test_unexpected_row_shape_is_rejected(engine):
    with engine.connect() as conn:
        conn.execute(text("CREATE TABLE odd_prompts (id TEXT, prompt TEXT, prompt_sdr)"))
        conn.execute(text("INSERT INTO odd_prompts (id, prompt, prompt_sdr) VALUES ('x', '', 42)"))
        conn.commit()

    with pytest.raises(RepositoryError) as exc_info:
        await PromptRepository(engine, "odd_prompts").fetch_one()

    assert exc_info.value.code == "bad_shape"


async def test_missing_table_is_a_repository_error(engine):
    repo = PromptRepository(engine, "no_such_table")

    with pytest.raises(RepositoryError) as exc_info:
        await repo.fetch_one()

    assert not isinstance(exc_info.value, NotFoundSignal)


async def test_backend_not_found_signal(repo):
    class NoResultEngine:
        def connect(self):
            raise NoResultFound("No row was found")

    repo.engine = NoResultEngine()

    with pytest.raises(NotFoundSignal):
        await repo.fetch_one()


async def test_constraint_violation_on_insert(engine):
    with engine.connect() as conn:
        conn.execute(text("""
            CREATE TABLE strict_prompts (
                id TEXT PRIMARY KEY DEFAULT (lower(hex(randomblob(16)))),
                prompt TEXT NOT NULL,
                prompt_sdr TEXT,
                created_by TEXT NOT NULL
            )
        """))
        conn.commit()

    with pytest.raises(RepositoryError) as exc_info:
        await PromptRepository(engine, "strict_prompts").save(ConfigRecord(prompt_text="Hello"))

    assert exc_info.value.code == "constraint"
