"""Base repository for database operations."""

from typing import Generic, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from fanblog.errors import DatabaseError, DuplicateRecordError, RecordWriteError
from fanblog.monitoring import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class BaseRepository(Generic[ModelT]):
    """
    Common plumbing for the entity repositories.

    Subclasses set ``model`` and add their own queries. Writes go through
    :meth:`_add_and_refresh` so store-level constraint violations surface as
    application errors instead of raw driver exceptions.

    Attributes:
        model: The SQLModel table class.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, record_id: int) -> ModelT | None:
        return await self.session.get(self.model, record_id)

    async def delete_by_id(self, record_id: int) -> bool:
        """
        Delete a record by ID.

        Returns:
            bool: True if record was deleted, False if not found
        """
        record = await self.get_by_id(record_id)
        if record is None:
            return False
        await self.session.delete(record)
        await self._flush()
        return True

    async def commit(self) -> None:
        """
        Commit the unit of work so other sessions read the new rows.

        Services call this before dropping cache entries; the request scoped
        transaction then has nothing left to commit.
        """
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise self._translate(e) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Database commit failed", table=self.model.__name__)
            raise RecordWriteError(self.model.__name__, type(e).__name__) from e

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise self._translate(e) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Database write failed", table=self.model.__name__)
            raise RecordWriteError(self.model.__name__, type(e).__name__) from e

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Add a record and refresh it from the database.

        Raises:
            DuplicateRecordError: If a unique constraint is violated
            DatabaseError: For other integrity errors
            RecordWriteError: When the write itself fails
        """
        self.session.add(record)
        await self._flush()
        await self.session.refresh(record)
        return record

    @staticmethod
    def _translate(error: IntegrityError) -> DatabaseError | DuplicateRecordError:
        message = str(error.orig) if error.orig else str(error)
        if "unique" in message.lower() or "duplicate" in message.lower():
            return DuplicateRecordError("A record with this value already exists.")
        return DatabaseError(f"Database integrity error: {message}")
