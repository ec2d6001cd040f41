from __future__ import annotations

import json
import random

import pytest

from processes.partition.enumerator import enumerate_partitions
from processes.partition.scoring import partition_score
from processes.partition.search import canonicalize, make_memo_key, optimize, search
from processes.partition.types import DebugOptions, ErrorCodes, PartitionError


def _random_matrix(rng: random.Random, names: list[str]) -> dict[str, dict[str, float]]:
    return {
        a: {b: float(rng.randint(-10, 10)) for b in names if b != a and rng.random() < 0.85}
        for a in names
    }


def test_concrete_scenario(five_matrix) -> None:
    best = optimize(list("ABCDE"), five_matrix, 3)
    assert best == [["A", "B", "E"], ["C"], ["D"]]
    assert partition_score(best, five_matrix) == 80


def test_two_groups_keeps_c_and_d_together(five_matrix) -> None:
    best = optimize(list("ABCDE"), five_matrix, 2)
    assert best == [["A", "B", "E"], ["C", "D"]]


def test_empty_input_returns_empty_partition(five_matrix) -> None:
    assert optimize([], five_matrix, 3) == []
    assert optimize([], {}, 1) == []
    # Validation is bypassed for empty input
    assert optimize([], {}, 0) == []


def test_single_group_mode(five_matrix) -> None:
    best = optimize(list("EDCBA"), five_matrix, 1)
    assert best == [["A", "B", "C", "D", "E"]]


@pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7])
def test_optimal_against_enumeration(n: int) -> None:
    rng = random.Random(1000 + n)
    names = [f"n{i}" for i in range(n)]
    for max_groups in (1, 2, 3, 4):
        matrix = _random_matrix(rng, names)
        best = optimize(names, matrix, max_groups)
        truth = max(partition_score(p, matrix) for p in enumerate_partitions(names, max_groups))
        assert partition_score(best, matrix) == truth

        # Coverage, disjointness and the group bound
        flat = [e for g in best for e in g]
        assert sorted(flat) == sorted(names)
        assert len(flat) == len(set(flat))
        assert 1 <= len(best) <= max_groups
        assert all(best_group for best_group in best)


def test_output_is_deterministic() -> None:
    rng = random.Random(3)
    names = list("ABCDEF")
    matrix = _random_matrix(rng, names)
    first = optimize(names, matrix, 3)
    second = optimize(names, matrix, 3)
    assert json.dumps(first) == json.dumps(second)
    assert first == canonicalize(first)


def test_ties_keep_first_found() -> None:
    # Zero affinity everywhere: the first completed partition is all-in-one
    names = ["B", "A", "C"]
    matrix = {n: {} for n in names}
    assert optimize(names, matrix, 3) == [["A", "B", "C"]]


def test_memo_key_ignores_ordering() -> None:
    k1 = make_memo_key(["D", "C"], [["B", "A"], ["E"]])
    k2 = make_memo_key(["C", "D"], [["E"], ["A", "B"]])
    assert k1 == k2
    assert make_memo_key(["C"], [["A", "B"], ["D"]]) != make_memo_key(["C"], [["A"], ["B", "D"]])


def test_canonicalize_sorts_members_then_groups() -> None:
    assert canonicalize([["E", "B"], ["D"], ["C", "A"]]) == [["A", "C"], ["B", "E"], ["D"]]


def test_search_exposes_counters(five_matrix) -> None:
    ctx = search(list("ABCDE"), five_matrix, 3)
    assert ctx.best_score == 80
    assert ctx.best_partition == [["A", "B", "E"], ["C"], ["D"]]
    assert ctx.stats.best_updates >= 1
    assert ctx.stats.pruned_branches > 0
    assert ctx.stats.states_cached == len(ctx.cache)


def test_debug_options_do_not_change_result(five_matrix, caplog) -> None:
    debug = DebugOptions(log_pruning=True, log_memo_hits=True, log_best_updates=True)
    with caplog.at_level("INFO", logger="processes.partition"):
        best = optimize(list("ABCDE"), five_matrix, 3, debug)
    assert best == optimize(list("ABCDE"), five_matrix, 3)
    events = [json.loads(r.getMessage())["event"] for r in caplog.records]
    assert "new_best" in events
    assert "pruned" in events
    assert events[-1] == "search_summary"


def test_contexts_are_not_shared(five_matrix) -> None:
    a = search(list("ABCDE"), five_matrix, 3)
    b = search(list("ABC"), five_matrix, 3)
    assert a.cache is not b.cache
    assert b.best_partition == [["A", "B"], ["C"]]


def test_invalid_max_groups(five_matrix) -> None:
    with pytest.raises(PartitionError) as exc:
        optimize(list("ABC"), five_matrix, 0)
    assert exc.value.code is ErrorCodes.CONFIG_ERROR
    assert "0" in str(exc.value)


def test_duplicate_entities(five_matrix) -> None:
    with pytest.raises(PartitionError) as exc:
        optimize(["A", "B", "A"], five_matrix, 3)
    assert exc.value.code is ErrorCodes.DUPLICATE_ENTITY
    assert exc.value.details["duplicates"] == ["A"]


def test_missing_matrix_row(five_matrix) -> None:
    with pytest.raises(PartitionError) as exc:
        optimize(["A", "Z"], five_matrix, 3)
    assert exc.value.code is ErrorCodes.MISSING_AFFINITY
    assert "Z" in str(exc.value)
    assert exc.value.details["missing"] == ["Z"]
