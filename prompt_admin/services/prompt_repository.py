import re
from typing import Optional
from pydantic import ValidationError as SchemaError
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from fastapi.concurrency import run_in_threadpool

from prompt_admin.schemas import ConfigRecord, SaveKind
from prompt_admin.logging import NotFoundSignal, RepositoryError, logger


_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PromptRepository:
    """Reads and writes the single SDR prompt row."""

    def __init__(self, engine: Engine, table_name: str):
        if not _IDENTIFIER.match(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self.engine = engine
        self.table_name = table_name

    async def fetch_one(self) -> Optional[ConfigRecord]:
        return await run_in_threadpool(self._fetch_one)

    async def save(self, record: ConfigRecord) -> SaveKind:
        return await run_in_threadpool(self._save, record)

    def _fetch_one(self) -> Optional[ConfigRecord]:
        # No ORDER BY: with duplicate rows the backend picks one.
        try:
            with self.engine.connect() as conn:
                row = conn.execute(text(f"""
                    SELECT id, prompt_sdr FROM "{self.table_name}" LIMIT 1
                """)).mappings().first()
        except NoResultFound as e:
            raise NotFoundSignal() from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch SDR prompt: {e}")
            raise RepositoryError("Failed to fetch SDR prompt", code="backend_error") from e

        if row is None:
            logger.info("No SDR prompt found, ready to create one")
            return None

        try:
            return ConfigRecord.model_validate({"id": row["id"], "prompt_text": row["prompt_sdr"]})
        except SchemaError as e:
            logger.error(f"Unexpected {self.table_name} row shape: {e}")
            raise RepositoryError("Unexpected record shape", code="bad_shape") from e

    def _save(self, record: ConfigRecord) -> SaveKind:
        if record.id:
            return self._update(record)
        return self._insert(record)

    def _update(self, record: ConfigRecord) -> SaveKind:
        # updated_at is maintained by a backend trigger
        try:
            with self.engine.connect() as conn:
                result = conn.execute(text(f"""
                    UPDATE "{self.table_name}" SET prompt_sdr = :prompt_text
                    WHERE id = :id
                """), {"prompt_text": record.prompt_text, "id": record.id})
                matched = result.rowcount
                conn.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to update SDR prompt {record.id}: {e}")
            raise RepositoryError("Failed to update SDR prompt", code="backend_error") from e

        if matched == 0:
            logger.warning(f"Update matched no rows for SDR prompt {record.id}")
        else:
            logger.info(f"SDR prompt {record.id} updated")
        return SaveKind.UPDATED

    def _insert(self, record: ConfigRecord) -> SaveKind:
        try:
            with self.engine.connect() as conn:
                conn.execute(text(f"""
                    INSERT INTO "{self.table_name}" (prompt, prompt_sdr, created_by)
                    VALUES ('', :prompt_text, :created_by)
                """), {"prompt_text": record.prompt_text, "created_by": record.created_by})
                conn.commit()
        except IntegrityError as e:
            logger.error(f"SDR prompt insert violated a constraint: {e}")
            raise RepositoryError("Constraint violation on insert", code="constraint") from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert SDR prompt: {e}")
            raise RepositoryError("Failed to insert SDR prompt", code="backend_error") from e

        logger.info(f"SDR prompt created by {record.created_by}")
        return SaveKind.INSERTED
