"""Resolve a chain of atomic updates between two versions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from services.update.errors import CycleDetectedError, NoPathFoundError
from services.update.models import UpdateEdge, UpdateSequence, Version


_LOGGER = logging.getLogger(__name__)


def resolve_update_sequence(
    edges: Iterable[UpdateEdge], start: Version, target: Version
) -> UpdateSequence:
    """Walk forward from ``start`` until an edge lands on ``target``.

    Each step takes the first edge, in the given order, that starts at the
    current version.  The walk never backtracks: if the first-listed edge leads
    to a dead end, :class:`NoPathFoundError` is raised even when another edge
    would have reached ``target``.  Returning to an already visited version
    raises :class:`CycleDetectedError`.  ``start == target`` yields an empty
    sequence.
    """

    candidates = tuple(edges)
    if start == target:
        _LOGGER.debug("Start version %s already equals target; nothing to resolve", start)
        return ()

    sequence: list[UpdateEdge] = []
    visited: set[Version] = set()
    current = start
    while True:
        if current in visited:
            raise CycleDetectedError(current)
        visited.add(current)

        edge = next((candidate for candidate in candidates if candidate.from_version == current), None)
        if edge is None:
            raise NoPathFoundError(current, target)

        sequence.append(edge)
        if edge.to_version == target:
            break
        current = edge.to_version

    _LOGGER.info(
        "Resolved %d update step(s) from %s to %s: %s",
        len(sequence),
        start,
        target,
        ", ".join(str(edge) for edge in sequence),
    )
    return tuple(sequence)


__all__ = ["resolve_update_sequence"]
