from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from khata.core.config import DATABASE_URL, DB_TYPE
import ssl

Base = declarative_base()


def _engine_options() -> dict:
    if DB_TYPE != "postgres":
        return {"echo": False, "future": True}

    # SSL setup for Supabase
    ssl_ctx = ssl.create_default_context()
    ssl_ctx.check_hostname = False
    ssl_ctx.verify_mode = ssl.CERT_NONE

    return {
        "echo": False,
        "future": True,
        "pool_size": 5,
        "max_overflow": 10,
        "connect_args": {
            # Disable prepared statements (PgBouncer transaction pooling)
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
            "server_settings": {"prepareThreshold": "0"},  # must be string!
            "ssl": ssl_ctx,
        },
    }


engine = create_async_engine(DATABASE_URL, **_engine_options())

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# SQLite ignores ON DELETE rules unless foreign keys are switched on per connection
if DB_TYPE == "sqlite":
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)

import khata.models  # noqa: E402,F401


# Auto-create tables (optional for dev)
async def init_models():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
