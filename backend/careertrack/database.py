from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from .config import get_settings

settings = get_settings()

Base = declarative_base()


def enable_sqlite_savepoints(engine):
    """
    Let SQLAlchemy own BEGIN on SQLite so SAVEPOINT (begin_nested) works.
    The driver's implicit transaction handling breaks nested transactions otherwise.
    """
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def build_engine(database_url: str, echo: bool = False):
    # Supabase/PostgreSQL with PgBouncer needs statement_cache_size=0
    # SQLite doesn't support these parameters
    if "postgresql" in database_url:
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={
                "statement_cache_size": 0,
                "prepared_statement_cache_size": 0,
            },
            pool_pre_ping=True,  # Verify connections before use
            pool_recycle=300,    # Recycle connections every 5 minutes
            pool_size=20,
            max_overflow=30,
        )

    engine = create_async_engine(database_url, echo=echo)
    if database_url.startswith("sqlite"):
        enable_sqlite_savepoints(engine)
    return engine


engine = build_engine(settings.database_url, echo=settings.debug)
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    # Import models so their tables are registered on Base.metadata
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def describe_db_error(error: Exception) -> str:
    """The driver's own message for a failed statement, without SQLAlchemy's wrapping."""
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)
