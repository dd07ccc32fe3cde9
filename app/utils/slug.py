"""Slug helpers for human-entered names."""

from __future__ import annotations

import unicodedata


def slugify(value: str, fallback: str = "item") -> str:
    """Lowercase ASCII slug with '-' separators.

    Accents are folded ("Información" -> "informacion"), any run of
    non-alphanumeric characters becomes a single '-', and leading/trailing
    separators are dropped.
    """
    folded = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    raw = folded.strip().lower()

    out = []
    prev_sep = False
    for ch in raw:
        if ch.isalnum():
            out.append(ch)
            prev_sep = False
        elif not prev_sep and out:
            out.append("-")
            prev_sep = True

    slug = "".join(out).strip("-")
    return slug or fallback


def unique_slug(base: str, taken: set[str]) -> str:
    """Append -2, -3, ... until the slug is not in `taken`."""
    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"
