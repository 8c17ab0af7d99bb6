"""
URL slug generation.

Turns software names into lowercase, hyphen separated URL segments, keeps
them out of the app's own route names and de-duplicates them with numeric
suffixes.
"""

import re
import unicodedata
from typing import Iterable, Optional

MAX_SLUG_LENGTH = 60

# Top level routes that a record slug must not shadow
RESERVED_SLUGS = frozenset({
    "admin", "api", "auth", "login", "signup", "signout",
    "dashboard", "settings", "profile", "search", "submit",
    "categories", "tags", "alternatives", "alternatives-to",
    "tech-stacks", "languages", "self-hosted", "launches",
    "about", "privacy", "terms", "refund", "donate",
    "advertise", "payment", "debug", "sitemap", "robots",
    "new", "edit", "delete", "create", "update",
})

_REPLACEMENTS = (
    ("c++", "cpp"),
    ("c#", "csharp"),
    ("f#", "fsharp"),
    (".net", "dotnet"),
    ("&", "and"),
    ("@", "at"),
    ("+", "plus"),
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_VALID_SLUG = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def generate_slug(name: str) -> str:
    """
    >>> generate_slug("VS Code (IDE)")
    'vs-code-ide'
    >>> generate_slug("C++ Compiler Tool")
    'cpp-compiler-tool'
    """
    slug = unicodedata.normalize("NFKD", (name or "").lower())
    slug = "".join(ch for ch in slug if not unicodedata.combining(ch))
    for old, new in _REPLACEMENTS:
        slug = slug.replace(old, new)
    slug = _NON_ALNUM.sub("-", slug).strip("-")

    if len(slug) > MAX_SLUG_LENGTH:
        slug = slug[:MAX_SLUG_LENGTH]
        last_hyphen = slug.rfind("-")
        if last_hyphen > MAX_SLUG_LENGTH * 0.5:
            slug = slug[:last_hyphen]
        slug = slug.strip("-")
    return slug


def generate_unique_slug(name: str, existing: Iterable[str]) -> str:
    existing = set(existing)
    slug = generate_slug(name)
    if slug in RESERVED_SLUGS:
        slug = f"{slug}-app"
    if slug not in existing:
        return slug

    counter = 2
    while f"{slug}-{counter}" in existing:
        counter += 1
    return f"{slug}-{counter}"


def validate_slug(slug: str) -> Optional[str]:
    """Return None for a usable slug, otherwise the reason it is rejected."""
    if not slug:
        return "Slug cannot be empty"
    if len(slug) > MAX_SLUG_LENGTH:
        return f"Slug must be {MAX_SLUG_LENGTH} characters or less"
    if slug != slug.lower():
        return "Slug must be lowercase"
    if slug.startswith("-") or slug.endswith("-"):
        return "Slug cannot start or end with a hyphen"
    if "--" in slug:
        return "Slug cannot contain consecutive hyphens"
    if not _VALID_SLUG.match(slug):
        return "Slug must contain only lowercase letters, numbers, and hyphens"
    if slug in RESERVED_SLUGS:
        return "Slug is a reserved word"
    return None


def slug_to_display_name(slug: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))
