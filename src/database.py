from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from src.config import settings
from src.exceptions import StoreUnavailableError

Base = declarative_base()

# Execution option marking a session transaction that will write
WRITE_TRANSACTION = {"sqlite_immediate": True}

def _sqlite_on_connect(dbapi_connection, connection_record):
    # Hand transaction control to the "begin" hook below
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    # Readers work from a snapshot and never block the writer
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()

def _sqlite_on_begin(conn):
    # Writers take the lock up front so check-then-update runs serialized
    if conn.get_execution_options().get("sqlite_immediate"):
        conn.exec_driver_sql("BEGIN IMMEDIATE")
    else:
        conn.exec_driver_sql("BEGIN")

def create_db_engine(database_url: str = settings.DATABASE_URL) -> Engine:
    """Create an engine; SQLite connections get foreign keys, WAL and immediate write transactions"""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT},
        )
        event.listen(engine, "connect", _sqlite_on_connect)
        event.listen(engine, "begin", _sqlite_on_begin)
        return engine

    return create_engine(database_url, pool_pre_ping=True)

engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """Yield one session per request and always release it"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def transaction(db: Session):
    """Run the block as one write transaction.

    Any read the session still has open is finished first, so the write lock
    is held only for the block itself. Commits on success; rolls back before
    any error leaves the block.
    """
    if db.in_transaction():
        db.commit()

    try:
        db.connection(execution_options=WRITE_TRANSACTION)
        yield db
        db.commit()
    except OperationalError as e:
        db.rollback()
        raise StoreUnavailableError() from e
    except Exception:
        db.rollback()
        raise

def init_db(bind: Engine = None):
    """Create all tables"""
    import src.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
