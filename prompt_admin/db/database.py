from functools import lru_cache
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from prompt_admin.core.config import settings
from prompt_admin.logging import logger


@lru_cache
def get_engine() -> Engine:
    """Create the pooled engine on first use."""
    return create_engine(
        settings.database_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def check_database_health(engine: Engine = None) -> bool:
    """Check if database is accessible."""
    engine = engine or get_engine()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


def init_prompt_table(engine: Engine = None, table_name: str = None):
    """Create the SDR prompt table if it does not exist (PostgreSQL)."""
    engine = engine or get_engine()
    table_name = table_name or settings.prompt_table
    try:
        with engine.connect() as conn:
            conn.execute(text(f"""
                CREATE TABLE IF NOT EXISTS "{table_name}" (
                    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                    prompt TEXT NOT NULL,
                    prompt_sdr TEXT,
                    created_by UUID,
                    created_at TIMESTAMPTZ DEFAULT NOW(),
                    updated_at TIMESTAMPTZ DEFAULT NOW()
                )
            """))
            conn.commit()
    except Exception as e:
        logger.error(f"Failed to initialize {table_name} table: {e}")
        raise
