"""Category and tag schemas."""

from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    """A blog category as returned by the API and cached under ``ALL_CATS``."""

    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    title: str
    slug: str = ""
    description: str | None = None
    count: int = Field(default=0, description="Number of published posts")


class Tag(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    title: str
    slug: str = ""
    description: str | None = None
    count: int = 0


class CategoryCreate(BaseModel):
    title: str = Field(..., examples=["Technology"])
    description: str | None = None


class CategoryUpdate(CategoryCreate):
    count: int = 0


class TagCreate(BaseModel):
    title: str = Field(..., examples=["python"])
    description: str | None = None


class TagUpdate(TagCreate):
    count: int = 0
