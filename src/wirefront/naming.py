from __future__ import annotations

import re
from functools import lru_cache

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def normalize(name: str) -> str:
    """Fold a name for comparison: ``display_name``, ``displayName`` and
    ``DisplayName`` all become ``displayname``.
    """
    return name.replace("_", "").lower()


@lru_cache(maxsize=1024)
def to_snake(name: str) -> str:
    parts = [part for part in name.split("_") if part]
    return "_".join(_CAMEL_BOUNDARY.sub("_", part).lower() for part in parts)


@lru_cache(maxsize=1024)
def to_studly(name: str) -> str:
    return "".join(word[:1].upper() + word[1:] for word in to_snake(name).split("_"))


def to_camel(name: str) -> str:
    studly = to_studly(name)
    return studly[:1].lower() + studly[1:]


def spellings(name: str, prefix: str = "") -> tuple[str, ...]:
    """Return the exact spellings tried for ``name``, most preferred first.

    ``spellings("display_name", "get")`` gives ``("get_display_name",
    "getDisplayName")``; without a prefix the name as written comes first.
    """
    if prefix:
        candidates = [f"{prefix}_{to_snake(name)}", f"{prefix}{to_studly(name)}"]
    else:
        candidates = [name, to_snake(name), to_camel(name)]
    return tuple(dict.fromkeys(candidates))


def matches_prefixed(member: str, prefix: str) -> bool:
    """Return true when ``member`` reads as ``prefix`` followed by a new word."""
    if not prefix:
        return True
    if member[: len(prefix)].lower() != prefix or len(member) == len(prefix):
        return False
    follower = member[len(prefix)]
    return follower == "_" or follower.isupper()
