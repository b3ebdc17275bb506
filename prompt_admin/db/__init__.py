from prompt_admin.db.database import (
    get_engine,
    check_database_health,
    init_prompt_table
)

__all__ = [
    "get_engine",
    "check_database_health",
    "init_prompt_table"
]
