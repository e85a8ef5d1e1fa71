"""Repositories for uploaded media and the meta key/value table."""

from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlmodel import col

from fanblog.models import MediaDB, MetaDB
from fanblog.repositories.base import BaseRepository
from fanblog.schemas import AppType, Media


def _month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=UTC)
    end = datetime(year + (month == 12), month % 12 + 1, 1, tzinfo=UTC)
    return start, end


class MediaRepository(BaseRepository[MediaDB]):
    model = MediaDB

    async def get(self, media_id: int) -> Media | None:
        row = await self.get_by_id(media_id)
        return Media.model_validate(row) if row else None

    async def get_by_file_name(self, file_name: str, year: int, month: int) -> Media | None:
        """Media uploaded in (``year``, ``month``) under ``file_name``."""
        start, end = _month_bounds(year, month)
        statement = (
            select(MediaDB)
            .where(col(MediaDB.file_name) == file_name)
            .where(col(MediaDB.uploaded_on) >= start, col(MediaDB.uploaded_on) < end)
            .limit(1)
        )
        row = (await self.session.execute(statement)).scalar_one_or_none()
        return Media.model_validate(row) if row else None

    async def exists(self, file_name: str, year: int, month: int, app_type: AppType) -> bool:
        start, end = _month_bounds(year, month)
        statement = (
            select(MediaDB.id)
            .where(col(MediaDB.app_type) == app_type, col(MediaDB.file_name) == file_name)
            .where(col(MediaDB.uploaded_on) >= start, col(MediaDB.uploaded_on) < end)
            .limit(1)
        )
        return (await self.session.execute(statement)).scalar_one_or_none() is not None

    async def get_list(self, page_index: int, page_size: int) -> tuple[list[Media], int]:
        total = (await self.session.execute(select(func.count()).select_from(MediaDB))).scalar_one()
        statement = (
            select(MediaDB)
            .order_by(col(MediaDB.uploaded_on).desc())
            .offset((max(page_index, 1) - 1) * page_size)
            .limit(page_size)
        )
        rows = (await self.session.execute(statement)).scalars()
        return [Media.model_validate(r) for r in rows], total

    async def create(self, media: Media) -> Media:
        row = MediaDB(**media.model_dump(exclude={"id"}))
        return Media.model_validate(await self._add_and_refresh(row))

    async def delete(self, media_id: int) -> bool:
        return await self.delete_by_id(media_id)


class MetaRepository(BaseRepository[MetaDB]):
    model = MetaDB

    async def get_values(self, prefix: str) -> dict[str, str]:
        """All rows whose key starts with ``prefix``."""
        statement = select(MetaDB).where(col(MetaDB.key).startswith(prefix))
        rows = (await self.session.execute(statement)).scalars()
        return {row.key: row.value for row in rows}

    async def upsert(self, values: dict[str, str]) -> None:
        existing = await self.session.execute(
            select(MetaDB).where(col(MetaDB.key).in_(list(values))),
        )
        rows = {row.key: row for row in existing.scalars()}
        for key, value in values.items():
            row = rows.get(key)
            if row is None:
                self.session.add(MetaDB(key=key, value=value))
            else:
                row.value = value
        await self._flush()
