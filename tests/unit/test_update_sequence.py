from __future__ import annotations

import pytest

from services.update import (
    CycleDetectedError,
    NoPathFoundError,
    UpdateEdge,
    parse_version,
    resolve_update_sequence,
)


def _edge(old: str, new: str) -> UpdateEdge:
    return UpdateEdge(parse_version(old), parse_version(new))


CHAIN = [_edge("1.0.0", "1.0.1"), _edge("1.0.1", "1.1.0"), _edge("1.1.0", "1.1.1")]


def test_resolves_full_chain_in_order() -> None:
    sequence = resolve_update_sequence(CHAIN, parse_version("1.0.0"), parse_version("1.1.1"))

    assert sequence == tuple(CHAIN)


def test_resolves_partial_chain() -> None:
    sequence = resolve_update_sequence(CHAIN, parse_version("1.0.1"), parse_version("1.1.0"))

    assert sequence == (_edge("1.0.1", "1.1.0"),)


def test_edges_may_arrive_unordered() -> None:
    shuffled = [CHAIN[2], CHAIN[0], CHAIN[1]]

    sequence = resolve_update_sequence(shuffled, parse_version("1.0.0"), parse_version("1.1.1"))

    assert sequence == tuple(CHAIN)


def test_unreachable_target_fails() -> None:
    with pytest.raises(NoPathFoundError) as excinfo:
        resolve_update_sequence(CHAIN, parse_version("1.0.0"), parse_version("1.2.0"))

    assert str(excinfo.value.version) == "1.1.1"
    assert str(excinfo.value.target) == "1.2.0"


def test_unknown_start_fails() -> None:
    with pytest.raises(NoPathFoundError) as excinfo:
        resolve_update_sequence(CHAIN, parse_version("0.1.0"), parse_version("1.1.1"))

    assert str(excinfo.value.version) == "0.1.0"


def test_start_equal_to_target_returns_empty_sequence() -> None:
    assert resolve_update_sequence(CHAIN, parse_version("1.0.1"), parse_version("1.0.1")) == ()
    assert resolve_update_sequence([], parse_version("1.0.1"), parse_version("1.0.1")) == ()


def test_self_loop_with_equal_start_and_target_terminates_empty() -> None:
    edges = [_edge("1.0.0", "1.0.0")]

    assert resolve_update_sequence(edges, parse_version("1.0.0"), parse_version("1.0.0")) == ()


def test_self_loop_is_detected() -> None:
    edges = [_edge("1.0.0", "1.0.0"), _edge("1.0.0", "1.0.1")]

    with pytest.raises(CycleDetectedError) as excinfo:
        resolve_update_sequence(edges, parse_version("1.0.0"), parse_version("1.0.1"))

    assert str(excinfo.value.version) == "1.0.0"


def test_longer_cycle_is_detected() -> None:
    edges = [_edge("1.0.0", "1.0.1"), _edge("1.0.1", "1.0.2"), _edge("1.0.2", "1.0.0")]

    with pytest.raises(CycleDetectedError):
        resolve_update_sequence(edges, parse_version("1.0.0"), parse_version("2.0.0"))


def test_first_listed_edge_wins_ties() -> None:
    edges = [
        _edge("1.0.0", "1.0.1"),
        _edge("1.0.0", "1.1.0"),
        _edge("1.0.1", "1.1.0"),
    ]

    sequence = resolve_update_sequence(edges, parse_version("1.0.0"), parse_version("1.1.0"))

    assert sequence == (_edge("1.0.0", "1.0.1"), _edge("1.0.1", "1.1.0"))


def test_greedy_walk_does_not_backtrack() -> None:
    edges = [
        _edge("1.0.0", "1.0.5"),
        _edge("1.0.0", "1.1.0"),
    ]

    with pytest.raises(NoPathFoundError) as excinfo:
        resolve_update_sequence(edges, parse_version("1.0.0"), parse_version("1.1.0"))

    assert str(excinfo.value.version) == "1.0.5"


def test_duplicate_edges_are_harmless() -> None:
    edges = [CHAIN[0], CHAIN[0], CHAIN[1], CHAIN[1]]

    sequence = resolve_update_sequence(edges, parse_version("1.0.0"), parse_version("1.1.0"))

    assert sequence == (CHAIN[0], CHAIN[1])
