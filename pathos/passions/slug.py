"""URL-safe slugs for passions."""

import re
from collections.abc import Awaitable, Callable

_STRIP_RE = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATOR_RE = re.compile(r"[\s_-]+")

FALLBACK_SLUG = "passion"


def slugify(name: str) -> str:
    """Lowercase, drop punctuation, join words with single hyphens.

    >>> slugify("  Art & Design ")
    'art-design'
    """
    slug = name.lower().strip()
    slug = _STRIP_RE.sub("", slug)
    slug = _SEPARATOR_RE.sub("-", slug)
    return slug.strip("-") or FALLBACK_SLUG


async def unique_slug(name: str, exists: Callable[[str], Awaitable[bool]]) -> str:
    """First of ``base``, ``base-1``, ``base-2``, ... for which exists() is false.

    The check runs against the live store; the unique index on passions.slug
    settles concurrent creators.
    """
    base = slugify(name)
    slug = base
    counter = 1
    while await exists(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
