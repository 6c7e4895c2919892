from __future__ import annotations

import pandas as pd
import pytest

from company_rollup.aggregate.rollup import (
    MissingGroupKeyError,
    accumulate,
    parse_metric,
    ratio,
    rollup,
    rollup_frame,
    summarize,
)
from company_rollup.models import GROUP_KEY, OUTPUT_COLUMNS


def test_scenario_acme_and_globex(scenario_rows) -> None:
    out = rollup(scenario_rows)
    assert [r["Company Name"] for r in out] == ["Acme", "Globex"]

    acme, globex = out
    assert acme["Count"] == 2
    assert acme["Audit Score"] == 0.5
    assert acme["Listings Posting"] == 1
    assert acme["Listings Not Posting"] == 1

    assert globex["Count"] == 1
    assert globex["Audit Score"] == 1.0
    assert globex["Listings Posting"] == 0
    assert globex["Listings Not Posting"] == 1


def test_rows_without_company_are_skipped(scenario_rows) -> None:
    rows = scenario_rows + [
        {GROUP_KEY: "", "Total Passed": "100", "Total Results": "100"},
        {GROUP_KEY: None, "Total Passed": "1"},
        {"Total Passed": "1"},
        {GROUP_KEY: float("nan")},
    ]
    out = rollup(rows)
    assert [r["Company Name"] for r in out] == ["Acme", "Globex"]
    assert sum(r["Count"] for r in out) == 3
    assert out[0]["Audit Score"] == 0.5


def test_count_is_conserved() -> None:
    names = ["b", "a", "", "c", "a", "b", "a", "", "d"]
    rows = [{GROUP_KEY: n, "Total Passed": str(i)} for i, n in enumerate(names)]
    out = rollup(rows)
    assert sum(r["Count"] for r in out) == sum(1 for n in names if n)


def test_groups_keep_first_seen_order() -> None:
    rows = [{GROUP_KEY: n} for n in ["Zeta", "alpha", "Zeta", "Mid", "alpha"]]
    assert [r["Company Name"] for r in rollup(rows)] == ["Zeta", "alpha", "Mid"]


def test_distinct_keys_never_merge() -> None:
    rows = [
        {GROUP_KEY: "Acme", "Is Claimed": "1"},
        {GROUP_KEY: "acme", "Is Claimed": "1"},
        {GROUP_KEY: "Acme ", "Is Claimed": "1"},
    ]
    out = rollup(rows)
    assert len(out) == 3
    assert all(r["Count"] == 1 and r["Verified"] == 1 for r in out)


def test_zero_denominator_gives_integer_zero(scenario_rows) -> None:
    acme = rollup(scenario_rows)[0]
    for col in ("Presence", "Reputation", "Marketing", "Messaging"):
        assert acme[col] == 0
        assert type(acme[col]) is int


def test_ratio_that_rounds_to_zero_stays_float() -> None:
    out = rollup([{GROUP_KEY: "Acme", "Presence Tests Passed": "1", "Presence Tests Taken": "1000"}])
    assert out[0]["Presence"] == 0.0
    assert isinstance(out[0]["Presence"], float)


def test_family_ratios_are_weighted_by_taken() -> None:
    rows = [
        {GROUP_KEY: "Acme", "Reputation Tests Passed": "1", "Reputation Total Tests Taken": "1"},
        {GROUP_KEY: "Acme", "Reputation Tests Passed": "0", "Reputation Total Tests Taken": "3"},
        {GROUP_KEY: "Acme", "Messaging Tests Passed": "2", "Messaging Tests Taken": "3"},
        {GROUP_KEY: "Acme", "Marketing Tests Passed": "1", "Marketing Total Tests Taken": "8"},
    ]
    acme = rollup(rows)[0]
    assert acme["Reputation"] == 0.25
    assert acme["Messaging"] == 0.67
    assert acme["Marketing"] == 0.13


def test_complements_add_back_to_count() -> None:
    rows = [
        {GROUP_KEY: "Acme", "Has Posts": "1", "Has Reviews High Total": "1"},
        {GROUP_KEY: "Acme", "Has Posts": "0", "Has Reviews High Total": "1"},
        {GROUP_KEY: "Acme", "Has Posts": "1", "Has Reviews High Total": "0"},
        {GROUP_KEY: "Globex", "Has Posts": "0"},
    ]
    sums = accumulate(rows)
    for row in rollup(rows):
        acc = sums[row["Company Name"]]
        assert row["Listings Posting"] + row["Listings Not Posting"] == row["Count"]
        assert row["Low Review Count"] + acc.reviews_high_total == row["Count"]


def test_complements_are_not_clamped() -> None:
    rows = [{GROUP_KEY: "Acme", "Has Reviews High Total": "3", "Has Posts": "5"}]
    acme = rollup(rows)[0]
    assert acme["Low Review Count"] == -2
    assert acme["Listings Not Posting"] == -4


def test_flag_columns_are_summed() -> None:
    rows = [
        {
            GROUP_KEY: "Acme",
            "Is Claimed": "1",
            "Has Website Utm Codes": "1",
            "Has Phone Number": "1",
            "Has Website Url": "0",
            "Has Reviews Average Rating": "1",
            "Has Posts Multiple": "1",
        },
        {
            GROUP_KEY: "Acme",
            "Is Claimed": "1",
            "Has Website Utm Codes": "0",
            "Has Phone Number": "1",
            "Has Website Url": "1",
            "Has Reviews Average Rating": "x",
            "Has Posts Multiple": "",
        },
    ]
    acme = rollup(rows)[0]
    assert acme["Verified"] == 2
    assert acme["Tracking"] == 1
    assert acme["Phone Number"] == 2
    assert acme["Website URL"] == 1
    assert acme["High Ratings"] == 1
    assert acme["Listings with Multiple Posts"] == 1


def test_presentation_columns_copy_canonical_values(scenario_rows) -> None:
    rows = scenario_rows + [
        {GROUP_KEY: "Acme", "Presence Tests Passed": "1", "Presence Tests Taken": "4",
         "Reputation Tests Passed": "1", "Reputation Total Tests Taken": "2",
         "Marketing Tests Passed": "3", "Marketing Total Tests Taken": "4"},
    ]
    for row in rollup(rows):
        assert list(row) == list(OUTPUT_COLUMNS)
        for n in ("1", "2", "3"):
            assert row[f"Company Name {n}"] == row["Company Name"]
            assert row[f"Count {n}"] == row["Count"]
        assert row["Presence 1"] == row["Presence"]
        assert row["Reputation 2"] == row["Reputation"]
        assert row["Marketing 2"] == row["Marketing"]


def test_rollup_is_repeatable(scenario_rows) -> None:
    assert rollup(scenario_rows) == rollup(scenario_rows)
    assert rollup(iter(scenario_rows)) == rollup(scenario_rows)


def test_summarize_matches_rollup(scenario_rows) -> None:
    scores = summarize(scenario_rows)
    assert [s.to_record() for s in scores] == rollup(scenario_rows)
    assert scores[0].company_name == "Acme"


def test_empty_input_gives_no_rows() -> None:
    assert rollup([]) == []


@pytest.mark.parametrize("bad", [None, "Acme", b"Acme", {GROUP_KEY: "Acme"}, 42])
def test_non_sequence_input_is_rejected(bad) -> None:
    with pytest.raises(TypeError):
        rollup(bad)


def test_non_mapping_record_is_rejected() -> None:
    with pytest.raises(TypeError):
        rollup([{GROUP_KEY: "Acme"}, ["Acme", "1"]])


def test_missing_key_column_is_fatal() -> None:
    with pytest.raises(MissingGroupKeyError):
        rollup([{"Company": "Acme", "Total Passed": "1"}])


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", 3.0),
        (" 4.5 ", 4.5),
        ("", 0.0),
        (None, 0.0),
        ("abc", 0.0),
        ("12abc", 12.0),
        ("-2", -2.0),
        ("nan", 0.0),
        ("1_0", 1.0),
        ("inf", 0.0),
        ("INF", 0.0),
        ("infinity", 0.0),
        ("\u0661\u0662", 0.0),
        ("\uff11\uff12", 0.0),
        ("Infinity", float("inf")),
        ("-Infinity", float("-inf")),
        ("1e3 tests", 1000.0),
        (".5", 0.5),
        (2, 2.0),
        (float("nan"), 0.0),
    ],
)
def test_parse_metric_defaults_to_zero(raw, expected) -> None:
    assert parse_metric(raw) == expected


@pytest.mark.parametrize(
    "passed, taken, expected",
    [
        (1, 8, 0.13),
        (1, 3, 0.33),
        (2, 3, 0.67),
        (5, 5, 1.0),
        (3, 0, 0),
        (3, -1, 0),
    ],
)
def test_ratio_rounds_half_up(passed, taken, expected) -> None:
    assert ratio(passed, taken) == expected


def test_rollup_frame_returns_output_columns() -> None:
    df = pd.DataFrame(
        [
            {GROUP_KEY: "Acme", "Total Passed": "1", "Total Results": "2"},
            {GROUP_KEY: None, "Total Passed": "1", "Total Results": "2"},
        ]
    )
    out = rollup_frame(df)
    assert list(out.columns) == list(OUTPUT_COLUMNS)
    assert len(out) == 1
    assert out.loc[0, "Audit Score"] == 0.5


def test_rollup_frame_header_only_when_no_companies() -> None:
    out = rollup_frame(pd.DataFrame(columns=[GROUP_KEY, "Total Passed"]))
    assert out.empty
    assert list(out.columns) == list(OUTPUT_COLUMNS)


def test_rollup_frame_requires_key_column() -> None:
    with pytest.raises(MissingGroupKeyError):
        rollup_frame(pd.DataFrame([{"Total Passed": "1"}]))
