"""
Slug generation and uniqueness resolution.

``slugify`` turns a title into a lowercase, hyphen separated ASCII identifier.
``next_unique_slug`` and ``slugify_taxonomy`` append ``-2``, ``-3``... until the
slug is free in its scope.
"""

from collections.abc import Awaitable, Callable, Iterable
from re import compile as re_compile
from secrets import choice
from string import ascii_lowercase, digits
from unicodedata import name as unicode_name

from unidecode import unidecode

from fanblog.configs.settings import (
    POST_TITLE_MAX_LENGTH,
    RANDOM_SLUG_LENGTH,
    SLUG_MAX_ATTEMPTS,
)
from fanblog.errors import SlugResolutionError

_NON_ALNUM = re_compile(r"[^a-z0-9]+")
_SUBSTITUTIONS = (("#", "s"), ("&", " and "))
_TOKEN_ALPHABET = ascii_lowercase + digits

SlugOwner = Callable[[str], Awaitable[int | None]]


def random_token(length: int = RANDOM_SLUG_LENGTH) -> str:
    """Return ``length`` random lowercase alphanumerics."""
    return "".join(choice(_TOKEN_ALPHABET) for _ in range(length))


def _transliterate(text: str) -> str:
    # Only Latin letters are folded to ASCII; other scripts become separators
    chars = []
    for char in text:
        if char.isascii():
            chars.append(char)
        elif unicode_name(char, "").startswith("LATIN"):
            chars.append(unidecode(char))
        else:
            chars.append(" ")
    return "".join(chars)


def slugify(
    text: str | None,
    max_length: int = POST_TITLE_MAX_LENGTH,
    random_chars_on_empty: int = RANDOM_SLUG_LENGTH,
) -> str:
    """
    Build a URL-safe slug from ``text``.

    Args:
        text: Title or other free text.
        max_length: Upper bound on the slug length.
        random_chars_on_empty: Length of the random token returned when nothing
            survives normalization. ``0`` returns an empty string instead.

    Returns:
        Lowercase alphanumerics separated by single hyphens.

    Examples:
        >>> slugify("Web Development!")
        'web-development'
        >>> slugify("C#")
        'cs'
    """
    text = text or ""
    for symbol, replacement in _SUBSTITUTIONS:
        text = text.replace(symbol, replacement)

    slug = _NON_ALNUM.sub("-", _transliterate(text).lower()).strip("-")
    slug = slug[:max_length].rstrip("-")

    if not slug and random_chars_on_empty > 0:
        return random_token(random_chars_on_empty)
    return slug


def uniquefy(slug: str, counter: int, max_length: int = POST_TITLE_MAX_LENGTH) -> str:
    """
    Give ``slug`` the ``-{counter}`` suffix without exceeding ``max_length``.

    The suffix left by the previous attempt (``-{counter - 1}``) is replaced
    rather than stacked, so ``a`` becomes ``a-2`` then ``a-3``. A slug already
    at the limit loses its tail to make room for the suffix.
    """
    previous = f"-{counter - 1}"
    if counter > 2 and slug.endswith(previous):
        slug = slug[: -len(previous)]
    suffix = f"-{counter}"
    return slug[: max_length - len(suffix)].rstrip("-") + suffix


async def next_unique_slug(
    candidate: str,
    owner_of: SlugOwner,
    *,
    exclude_id: int | None = None,
    max_length: int = POST_TITLE_MAX_LENGTH,
    max_attempts: int = SLUG_MAX_ATTEMPTS,
) -> str:
    """
    Query ``owner_of`` until ``candidate`` (or a suffixed form) is free.

    Args:
        candidate: Slug to start from.
        owner_of: Returns the id of the record holding a slug in scope, or None.
        exclude_id: Id of the record being updated. A slug it already holds
            counts as free.
        max_length: Upper bound on the suffixed slug.
        max_attempts: Collisions tolerated before giving up.

    Raises:
        SlugResolutionError: When every attempt collides.
    """
    slug = candidate
    counter = 2
    for _ in range(max_attempts):
        owner = await owner_of(slug)
        if owner is None or (exclude_id is not None and owner == exclude_id):
            return slug
        slug = uniquefy(slug, counter, max_length)
        counter += 1
    raise SlugResolutionError(candidate, max_attempts)


def slugify_taxonomy(
    title: str,
    max_length: int,
    existing_slugs: Iterable[str],
    max_attempts: int = SLUG_MAX_ATTEMPTS,
) -> str:
    """Slug for a category or tag, unique (case-insensitively) among ``existing_slugs``."""
    taken = {s.lower() for s in existing_slugs if s}
    base = slugify(title, max_length)
    slug = base
    counter = 2
    for _ in range(max_attempts):
        if slug not in taken:
            return slug
        suffix = f"-{counter}"
        slug = base[: max_length - len(suffix)].rstrip("-") + suffix
        counter += 1
    raise SlugResolutionError(base, max_attempts)
