"""Purely lexical normalization of jail-relative paths.

Nothing in this module touches the filesystem. A virtual path always starts
with ``/`` and holds no ``.``, ``..`` or empty segments; ``..`` at the top
clamps to the root instead of climbing above it.
"""

import os
from typing import Union

SEPARATOR = "/"
ROOT = "/"

PathInput = Union[str, "os.PathLike[str]"]


def _as_text(path: PathInput) -> str:
    """Return the text of a str or PathLike path; reject anything else."""
    value = os.fspath(path) if isinstance(path, os.PathLike) else path
    if not isinstance(value, str):
        raise TypeError(
            f"path must be str or PathLike[str], not {type(path).__name__}"
        )
    return value


def _segments(path: PathInput) -> list[str]:
    """Collapse the path into its segment stack, clamping at the root."""
    stack: list[str] = []
    for segment in _as_text(path).split(SEPARATOR):
        if segment in ("", "."):
            continue
        if segment == "..":
            if stack:
                stack.pop()
            continue
        stack.append(segment)
    return stack


def normalize(path: PathInput) -> str:
    """Return the canonical virtual path for ``path``."""
    return SEPARATOR + SEPARATOR.join(_segments(path))


def dirname(path: PathInput) -> tuple[str, str]:
    """Split ``path`` into its normalized parent and its final segment.

    The root splits into ``("/", "")``.
    """
    stack = _segments(path)
    if not stack:
        return ROOT, ""
    leaf = stack.pop()
    return SEPARATOR + SEPARATOR.join(stack), leaf


def join(parent: PathInput, *segments: str) -> str:
    """Append ``segments`` to a virtual parent and normalize the result."""
    return normalize(SEPARATOR.join([_as_text(parent), *segments]))


def split_segments(path: PathInput) -> list[str]:
    """Return the segments of the normalized path; empty for the root."""
    return _segments(path)
