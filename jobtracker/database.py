import logging
import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import (
    DATABASE_URL,
    DB_LOG_SLOW_QUERIES,
    DB_MAX_OVERFLOW,
    DB_POOL_RECYCLE,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
    DB_SLOW_QUERY_THRESHOLD,
)

logger = logging.getLogger(__name__)


# Connection execution option marking a unit of work that will write
WRITE_LOCK = "sqlite_write_lock"


def configure_sqlite(engine: Engine) -> None:
    """
    Make SQLite behave like a serializing store.

    pysqlite's own transaction handling is switched off so the begin event
    decides how each transaction starts. Units of work opened through
    ``transaction()`` begin with BEGIN IMMEDIATE, taking the write lock
    before the first read, so read-validate-write sequences (conflict check
    + insert, balance check + payment) cannot interleave. Plain lookups use
    a deferred BEGIN and, with the WAL journal, never block a writer.
    Foreign keys are enforced on every connection.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        # In-memory databases keep their "memory" journal
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(WRITE_LOCK):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def enable_slow_query_logging(engine: Engine, threshold: float = DB_SLOW_QUERY_THRESHOLD) -> None:
    """Log any statement that takes longer than ``threshold`` seconds"""

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, _cursor, statement, _parameters, context, _executemany):
        total = time.time() - conn.info["query_start_time"].pop(-1)
        if total > threshold:
            logger.warning(f"🐌 Slow query ({total:.2f}s): {statement[:200]}...")


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        new_engine = create_engine(url, connect_args={"check_same_thread": False})
        configure_sqlite(new_engine)
        return new_engine

    return create_engine(
        url,
        pool_pre_ping=True,  # Test connections before using
        pool_recycle=DB_POOL_RECYCLE,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_POOL_TIMEOUT,
        echo=False,
    )


try:
    engine = build_engine(DATABASE_URL)
    logger.info(f"✅ Database engine created ({engine.dialect.name})")
except Exception as e:
    logger.error(f"❌ Failed to create database engine: {e}")
    raise

if DB_LOG_SLOW_QUERIES:
    enable_slow_query_logging(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a unit of work: commit when the block finishes, roll back and
    re-raise on any exception so nothing is partially applied.

    A read transaction left open by earlier lookups on the session is ended
    first, so the unit of work starts fresh under the write lock.
    """
    if db.in_transaction():
        db.commit()
    try:
        db.connection(execution_options={WRITE_LOCK: True})
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
