from sqlalchemy.pool import StaticPool

from halolight.database.engine import build_engine, is_in_memory_sqlite


def test_is_in_memory_sqlite():
    assert is_in_memory_sqlite("sqlite+aiosqlite:///:memory:")
    assert is_in_memory_sqlite("sqlite+aiosqlite:///file:db?mode=memory&cache=shared&uri=true")
    assert not is_in_memory_sqlite("sqlite+aiosqlite:///./halolight.db")
    assert not is_in_memory_sqlite("postgresql+asyncpg://localhost/halolight")


def test_only_in_memory_sqlite_shares_a_connection(tmp_path):
    memory = build_engine("sqlite+aiosqlite:///:memory:")
    on_disk = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'halolight.db'}")

    assert isinstance(memory.sync_engine.pool, StaticPool)
    assert not isinstance(on_disk.sync_engine.pool, StaticPool)
