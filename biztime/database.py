"""
BizTime Backend — Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, FastAPI session dependency,
       and the shared query helper used by every service.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error, and
       executes parameterized statements returning rows as plain dicts.
Who:   Used by route handlers via FastAPI's dependency injection system and
       by services through run_query().
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling Strategy:
    pool_size=10:      Persistent connections for normal load
    max_overflow=5:    Temporary connections for traffic spikes
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour
    SQLite (tests) uses SQLAlchemy's default pool for the driver instead.

Transactions:
    One session per request means one transaction per request. Paired reads
    (an invoice, then its company) see the same snapshot, and a failed
    statement rolls back everything the request wrote.
"""

import logging
from typing import Any, AsyncGenerator, Dict, List, Optional

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.base import Executable

from biztime.config import settings
from biztime.exceptions import ConstraintViolationError, DatabaseError

logger = logging.getLogger(__name__)


# ── Engine Configuration ──────────────────────────────────────────────────
def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Turn on FOREIGN KEY enforcement for every new SQLite connection.

    SQLite ignores REFERENCES clauses unless the pragma is set per connection;
    PostgreSQL always enforces them.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, **overrides: Any) -> AsyncEngine:
    """
    Create an async engine for `database_url`.

    Pool sizing from settings applies to server databases only; SQLite URLs
    get the driver's default pool plus foreign key enforcement. Keyword
    overrides are passed straight to create_async_engine (tests use this to
    install a StaticPool for in-memory databases).
    """
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    is_sqlite = database_url.startswith("sqlite")
    if not is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    options.update(overrides)

    new_engine = create_async_engine(database_url, **options)
    if is_sqlite:
        enable_sqlite_foreign_keys(new_engine)
    return new_engine


engine = build_engine(settings.database_url)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations and
    the test suite uses to create the schema.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On success: commits the transaction
        4. On error: rolls back the transaction and re-raises
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        async def list_companies(db: AsyncSession = Depends(get_db_session)):
            return await service.list_companies(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond
        finally:
            await session.close()


# ── Query Execution ───────────────────────────────────────────────────────
async def run_query(
    db: AsyncSession,
    statement: Executable,
    operation: str = "query",
) -> List[Dict[str, Any]]:
    """
    Execute a parameterized statement and return its rows as dicts.

    What:    The single query-execution interface shared by all services.
    How:     Caller values travel as bound parameters inside the SQLAlchemy
             statement; nothing is interpolated into SQL text. Rows come back
             as {column_name: value} dicts in storage order. Writes must carry
             a RETURNING clause; an empty list means nothing matched.

    Args:
        db:        Request-scoped async session
        statement: select()/insert()/update()/delete() construct
        operation: Short label used in logs and error context (e.g. "create_company")

    Raises:
        ConstraintViolationError: The store rejected the write (unique, foreign
                                  key or check constraint).
        DatabaseError:            Any other SQLAlchemy/driver failure.
    """
    try:
        result = await db.execute(statement)
    except IntegrityError as e:
        logger.error("Constraint violation during %s: %s", operation, e.orig)
        raise ConstraintViolationError(
            context={"operation": operation, "driver_error": str(e.orig)},
        ) from e
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            context={"operation": operation, "error_type": type(e).__name__},
        ) from e

    return [dict(row) for row in result.mappings().all()]


async def run_query_one(
    db: AsyncSession,
    statement: Executable,
    operation: str = "query",
) -> Optional[Dict[str, Any]]:
    """First row of run_query(), or None when the statement matched nothing."""
    rows = await run_query(db, statement, operation)
    return rows[0] if rows else None


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
