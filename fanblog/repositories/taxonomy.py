"""Repositories for categories and tags."""

from sqlalchemy import select, update
from sqlmodel import col

from fanblog.errors import NotFoundError
from fanblog.models import CategoryDB, PostDB, TagDB
from fanblog.repositories.base import BaseRepository
from fanblog.schemas import Category, Tag


class CategoryRepository(BaseRepository[CategoryDB]):
    model = CategoryDB

    async def get_list(self) -> list[Category]:
        result = await self.session.execute(select(CategoryDB).order_by(col(CategoryDB.title)))
        return [Category.model_validate(row) for row in result.scalars()]

    async def get(self, category_id: int) -> Category | None:
        row = await self.get_by_id(category_id)
        return Category.model_validate(row) if row else None

    async def create(self, category: Category) -> Category:
        row = CategoryDB(**category.model_dump(exclude={"id"}))
        return Category.model_validate(await self._add_and_refresh(row))

    async def update(self, category: Category) -> Category:
        row = await self.get_by_id(category.id)
        if row is None:
            raise NotFoundError(f"Category with id {category.id} is not found.")
        row.title = category.title
        row.slug = category.slug
        row.description = category.description
        row.count = category.count
        return Category.model_validate(await self._add_and_refresh(row))

    async def delete(self, category_id: int, default_category_id: int) -> None:
        """Move the category's posts to the default category, then delete it."""
        await self.session.execute(
            update(PostDB)
            .where(col(PostDB.category_id) == category_id)
            .values(category_id=default_category_id),
        )
        await self.delete_by_id(category_id)


class TagRepository(BaseRepository[TagDB]):
    model = TagDB

    async def get_list(self) -> list[Tag]:
        result = await self.session.execute(select(TagDB).order_by(col(TagDB.title)))
        return [Tag.model_validate(row) for row in result.scalars()]

    async def get(self, tag_id: int) -> Tag | None:
        row = await self.get_by_id(tag_id)
        return Tag.model_validate(row) if row else None

    async def create(self, tag: Tag) -> Tag:
        row = TagDB(**tag.model_dump(exclude={"id"}))
        return Tag.model_validate(await self._add_and_refresh(row))

    async def update(self, tag: Tag) -> Tag:
        row = await self.get_by_id(tag.id)
        if row is None:
            raise NotFoundError(f"Tag with id {tag.id} is not found.")
        row.title = tag.title
        row.slug = tag.slug
        row.description = tag.description
        row.count = tag.count
        return Tag.model_validate(await self._add_and_refresh(row))

    async def delete(self, tag_id: int) -> None:
        # post_tags rows go with it (ON DELETE CASCADE)
        await self.delete_by_id(tag_id)
