"""Events published by the blog post service."""

from dataclasses import dataclass, field

from fanblog.schemas import BlogPost


@dataclass(frozen=True, slots=True)
class BlogPostBeforeCreate:
    """Published before a new post is stored, so missing taxonomy can be created."""

    category_title: str | None = None
    tag_titles: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BlogPostBeforeUpdate:
    category_title: str | None = None
    tag_titles: tuple[str, ...] = ()
    # Titles of the tags the post carries before this update
    current_tag_titles: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class BlogPostCreated:
    blog_post: BlogPost


@dataclass(frozen=True, slots=True)
class BlogPostUpdated:
    blog_post: BlogPost
