from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

Base = declarative_base()


class HostDB(Base):
    __tablename__ = "hosts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, index=True, nullable=False)
    ip = Column(String, nullable=True)
    environment = Column(String, nullable=True)
    last_compile = Column(DateTime, nullable=True)

    resources = relationship(
        "ResourceDB",
        back_populates="host",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ResourceDB.id",
    )


class ResourceDB(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    restype = Column(String, index=True, nullable=False)
    host_id = Column(Integer, ForeignKey("hosts.id", ondelete="CASCADE"), index=True)
    exported = Column(Boolean, default=False, index=True)
    line = Column(Integer, nullable=True)

    host = relationship("HostDB", back_populates="resources")
    param_values = relationship(
        "ParamValueDB",
        back_populates="resource",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ParamValueDB.id",
    )

    @property
    def name(self) -> str:
        return f"{self.restype}[{self.title}]"


class ParamNameDB(Base):
    __tablename__ = "param_names"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, index=True, nullable=False)


class ParamValueDB(Base):
    __tablename__ = "param_values"

    id = Column(Integer, primary_key=True)
    value = Column(Text, nullable=False)
    line = Column(Integer, default=0)
    param_name_id = Column(Integer, ForeignKey("param_names.id"), index=True, nullable=False)
    resource_id = Column(Integer, ForeignKey("resources.id", ondelete="CASCADE"), index=True, nullable=False)

    param_name = relationship("ParamNameDB")
    resource = relationship("ResourceDB", back_populates="param_values")


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    # SQLite ignores ON DELETE CASCADE unless each connection opts in
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON;")
        cursor.close()


def create_db_engine(database_url: str) -> Engine:
    if not database_url.startswith("sqlite"):
        return create_engine(database_url)
    engine = create_engine(database_url, connect_args={"check_same_thread": False})
    enable_sqlite_foreign_keys(engine)
    return engine


def create_session_factory(database_url: str) -> sessionmaker:
    engine = create_db_engine(database_url)
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
