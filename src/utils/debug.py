from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

_verbose = False
_prefix = "[edgefan]"


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


@contextmanager
def verbose_logging(enabled: bool = True) -> Iterator[None]:
    """Turn debug logs on/off for a block and restore the previous setting."""
    previous = _verbose
    set_verbose(enabled)
    try:
        yield
    finally:
        set_verbose(previous)


def log(message: str, *, stage: str | None = None) -> None:
    if not _verbose:
        return
    tag = f"{_prefix}[{stage}]" if stage else _prefix
    print(f"{tag} {message}")
