from __future__ import annotations

import itertools

from tfe_plan_summary.aggregator import iter_actions, summarize
from tfe_plan_summary.domain.models import ChangeSummary


def _record(*actions: str) -> dict[str, object]:
    return {"address": "null_resource.x", "change": {"actions": list(actions)}}


def test_empty_resource_changes_yields_zero_summary() -> None:
    assert summarize({"resource_changes": []}) == ChangeSummary(0, 0, 0)


def test_missing_resource_changes_is_not_an_error() -> None:
    assert summarize({"format_version": "1.2"}) == ChangeSummary(0, 0, 0)
    assert summarize({"resource_changes": None}) == ChangeSummary(0, 0, 0)


def test_only_no_op_records_yield_zero_summary() -> None:
    document = {"resource_changes": [_record("no-op"), _record("no-op")]}
    assert summarize(document) == ChangeSummary(0, 0, 0)


def test_counts_create_update_delete() -> None:
    document = {
        "resource_changes": [
            _record("create"),
            _record("update"),
            _record("create"),
            _record("delete"),
            _record("no-op"),
        ]
    }
    assert summarize(document) == ChangeSummary(create=2, update=1, delete=1)


def test_read_and_unknown_tokens_are_ignored() -> None:
    document = {
        "resource_changes": [
            _record("read"),
            _record("replace"),
            _record("forget"),
            _record("update"),
        ]
    }
    assert summarize(document) == ChangeSummary(create=0, update=1, delete=0)


def test_replace_pair_counts_one_delete_and_one_create() -> None:
    document = {
        "resource_changes": [_record("delete", "create"), _record("create", "delete")]
    }
    assert summarize(document) == ChangeSummary(create=2, update=0, delete=2)


def test_records_without_actions_are_skipped() -> None:
    document = {
        "resource_changes": [
            {"address": "a"},
            {"address": "b", "change": None},
            {"address": "c", "change": {}},
            {"address": "d", "change": {"actions": "create"}},
            "not-a-record",
            _record("create"),
        ]
    }
    assert summarize(document) == ChangeSummary(create=1, update=0, delete=0)


def test_counts_never_exceed_total_tokens() -> None:
    document = {
        "resource_changes": [
            _record("create"),
            _record("no-op"),
            _record("delete", "create"),
            _record("read"),
        ]
    }
    summary = summarize(document)
    total = len(list(iter_actions(document)))
    assert summary.create + summary.update + summary.delete <= total


def test_summary_is_order_independent() -> None:
    records = [_record("create"), _record("update"), _record("delete", "create"), _record("no-op")]
    expected = summarize({"resource_changes": records})

    for permutation in itertools.permutations(records):
        assert summarize({"resource_changes": list(permutation)}) == expected
