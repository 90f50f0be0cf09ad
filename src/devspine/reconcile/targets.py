"""Target list normalization."""

from __future__ import annotations

from collections.abc import Iterable

from devspine.core.errors import EmptyTargetListError, InvalidTargetError


def normalize_targets(targets: Iterable[str]) -> list[str]:
    """Validate a raw identifier list and return it unchanged, in order.

    Duplicates are kept: each one is dispatched and reported on its own.

    Raises:
        EmptyTargetListError: no identifiers were given.
        InvalidTargetError: an entry is not a non-blank string.
    """
    normalized = list(targets)
    if not normalized:
        raise EmptyTargetListError()
    for position, target in enumerate(normalized):
        if not isinstance(target, str) or not target.strip():
            raise InvalidTargetError(target, position)
    return normalized
