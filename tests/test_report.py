import json

from src.rifugio.models import UNAVAILABLE, RevealResult
from src.rifugio.report import (
    build_day_table,
    build_report,
    format_report,
    report_as_json,
)


def _result(index, label, text=None, day=None, anchor_text=None):
    return RevealResult(
        cell_index=index,
        day=day,
        label_text=label,
        anchor_text=anchor_text,
        revealed_text=text,
        capacity=None if text is None else int(text),
    )


def test_build_day_table_keeps_unparsable_capacity_as_none():
    table = build_day_table([
        _result(0, "20", "4", day=20),
        _result(1, "21", None, day=21),
    ])
    assert table == {20: 4, 21: None}
    assert 21 in table


def test_build_day_table_drops_results_without_day():
    table = build_day_table([
        _result(0, "libero", "4"),
        _result(1, "22", "2", day=22),
    ])
    assert table == {22: 2}


def test_build_day_table_rederives_day_from_reread_label():
    table = build_day_table([
        _result(0, "23\nlibero", "5"),
        _result(1, "", "1", anchor_text="24"),
    ])
    assert table == {23: 5, 24: 1}


def test_build_day_table_later_result_wins_on_collision():
    table = build_day_table([
        _result(0, "21", "3", day=21),
        _result(1, "21", "6", day=21),
    ])
    assert table == {21: 6}


def test_build_report_applies_minimum():
    assert build_report({21: 3}, 21, 21, 2) == [(21, 3)]
    assert build_report({21: 3}, 21, 21, 4) == [(21, UNAVAILABLE)]


def test_build_report_minimum_is_inclusive():
    assert build_report({21: 2}, 21, 21, 2) == [(21, 2)]


def test_build_report_empty_table():
    assert build_report({}, 20, 22, 1) == [
        (20, UNAVAILABLE),
        (21, UNAVAILABLE),
        (22, UNAVAILABLE),
    ]


def test_build_report_null_capacity_is_unavailable():
    assert build_report({21: None}, 21, 21, 0) == [(21, UNAVAILABLE)]


def test_build_report_never_reports_days_outside_range():
    table = {19: 8, 20: 8, 21: 8, 25: 8}
    report = build_report(table, 20, 22, 1)
    assert [day for day, _ in report] == [20, 21, 22]
    assert report == [(20, 8), (21, 8), (22, UNAVAILABLE)]


def test_build_report_reversed_range_is_empty():
    assert build_report({21: 3}, 22, 21, 1) == []


def test_format_report_lines():
    assert format_report([(20, UNAVAILABLE), (21, 3)]) == [
        "20: unavailable",
        "21: 3",
    ]


def test_report_as_json():
    rows = json.loads(report_as_json([(20, UNAVAILABLE), (21, 3)]))
    assert rows == [
        {"day": 20, "beds": None, "available": False},
        {"day": 21, "beds": 3, "available": True},
    ]
