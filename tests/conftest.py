import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from nodeclean.storeconfigs.database import (  # noqa: E402
    HostDB,
    ParamNameDB,
    ParamValueDB,
    ResourceDB,
    enable_sqlite_foreign_keys,
    init_db,
)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "storeconfigs: marks tests that use the stored-configuration database")
    config.addinivalue_line("markers", "cli: marks command line tests")


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Keep developer environment settings out of the tests."""
    monkeypatch.delenv("NODECLEAN_CONFIG_PATH", raising=False)
    monkeypatch.delenv("NODECLEAN_LOG_LEVEL", raising=False)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


def _param_name(session, name):
    param_name = session.query(ParamNameDB).filter(ParamNameDB.name == name).first()
    if param_name is None:
        param_name = ParamNameDB(name=name)
        session.add(param_name)
        session.flush()
    return param_name


def add_resource(session, host, restype, title, *, exported=True, params=None):
    """Insert a resource with ``params`` given as ``{name: (value, line)}``."""
    resource = ResourceDB(restype=restype, title=title, exported=exported, host=host)
    session.add(resource)
    session.flush()
    for name, (value, line) in (params or {}).items():
        session.add(
            ParamValueDB(
                resource_id=resource.id,
                param_name_id=_param_name(session, name).id,
                value=value,
                line=line,
            )
        )
    session.commit()
    return resource


@pytest.fixture
def web1(db_session):
    """web1.example.com exporting an ensurable File and a non-ensurable Exec."""
    host = HostDB(name="web1.example.com", ip="10.0.0.5", environment="production")
    db_session.add(host)
    db_session.commit()
    add_resource(db_session, host, "File", "/etc/foo", params={"ensure": ("present", 5), "owner": ("root", 6)})
    add_resource(db_session, host, "Exec", "/bin/bar", params={"command": ("/bin/bar", 9)})
    return host


@pytest.fixture
def make_resource(db_session):
    def _make(host, restype, title, *, exported=True, params=None):
        return add_resource(db_session, host, restype, title, exported=exported, params=params)

    return _make


@pytest.fixture
def make_host(db_session):
    def _make(name):
        host = HostDB(name=name)
        db_session.add(host)
        db_session.commit()
        return host

    return _make


@pytest.fixture
def lock_host(db_session):
    """Make deleting the named host fail inside the database."""

    def _lock(name):
        db_session.execute(
            text(
                "CREATE TRIGGER lock_host BEFORE DELETE ON hosts "
                f"WHEN OLD.name = '{name}' BEGIN SELECT RAISE(ABORT, 'host is locked'); END"
            )
        )
        db_session.commit()

    return _lock
