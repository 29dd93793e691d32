from datetime import date

from lexical.models import AssignmentBlock
from scheduling.calendar_expander import (
    assignments_for_date,
    day_key,
    expand_blocks,
    month_grid,
    week_days,
)


def _block(start, end=None, *titles, tag="read"):
    return AssignmentBlock(
        start_date=start,
        end_date=end,
        start_time="09:00",
        end_time="10:00",
        location=None,
        assignments=[{"title": t, "tag": tag} for t in titles],
    )


def test_range_expands_to_every_day():
    expanded = expand_blocks([_block("2024-04-03", "2024-04-05", "Oral arguments", tag="oral")])

    assert sorted(expanded) == ["2024-04-03", "2024-04-04", "2024-04-05"]
    for key, block in expanded.items():
        assert block.start_date == key
        assert [a.title for a in block.assignments] == ["Oral arguments"]
        assert block.start_time == "09:00"

    # endDate is only kept on the first day of the range.
    assert expanded["2024-04-03"].end_date == "2024-04-05"
    assert expanded["2024-04-04"].end_date is None
    assert expanded["2024-04-05"].end_date is None


def test_single_day_block():
    expanded = expand_blocks([_block("2024-09-03", None, "Read ch. 1")])
    assert list(expanded) == ["2024-09-03"]
    assert expanded["2024-09-03"].end_date is None


def test_same_day_blocks_merge_in_order():
    expanded = expand_blocks([
        _block("2024-09-03", None, "Read ch. 1"),
        _block("2024-09-03", None, "Draft memo", "Outline", tag="write"),
    ])
    titles = [a.title for a in expanded["2024-09-03"].assignments]
    assert titles == ["Read ch. 1", "Draft memo", "Outline"]


def test_overlapping_range_merges_into_existing_days():
    expanded = expand_blocks([
        _block("2024-09-04", None, "Quiz", tag="other"),
        _block("2024-09-03", "2024-09-05", "Group project", tag="write"),
    ])
    assert [a.title for a in expanded["2024-09-04"].assignments] == ["Quiz", "Group project"]
    assert [a.title for a in expanded["2024-09-03"].assignments] == ["Group project"]
    assert expanded["2024-09-04"].end_date is None


def test_duplicate_first_title_skips_whole_incoming_list():
    expanded = expand_blocks([
        _block("2024-09-03", None, "Read ch. 1"),
        _block("2024-09-03", None, "Read ch. 1", "Read ch. 2"),
    ])
    titles = [a.title for a in expanded["2024-09-03"].assignments]
    assert titles == ["Read ch. 1"]


def test_expansion_is_deterministic():
    blocks = [
        _block("2024-09-03", "2024-09-04", "Read ch. 1"),
        _block("2024-09-04", None, "Draft memo", tag="write"),
    ]
    first = {k: v.model_dump() for k, v in expand_blocks(blocks).items()}
    second = {k: v.model_dump() for k, v in expand_blocks(blocks).items()}
    assert first == second


def test_input_blocks_are_not_mutated():
    original = _block("2024-09-03", None, "Read ch. 1")
    expand_blocks([original, _block("2024-09-03", None, "Draft memo", tag="write")])
    assert [a.title for a in original.assignments] == ["Read ch. 1"]


def test_blocks_without_start_date_are_dropped():
    expanded = expand_blocks([
        _block(None, None, "Floating task"),
        _block("not a date", None, "Garbage"),
        _block("2024-09-03", None, "Read ch. 1"),
    ])
    assert list(expanded) == ["2024-09-03"]


def test_end_before_start_yields_no_days():
    assert expand_blocks([_block("2024-09-05", "2024-09-03", "Backwards")]) == {}


def test_lookup_by_date():
    expanded = expand_blocks([_block("2024-09-03", None, "Read ch. 1")])
    assert assignments_for_date(expanded, date(2024, 9, 3)).assignments[0].title == "Read ch. 1"
    assert assignments_for_date(expanded, date(2024, 9, 4)) is None
    assert day_key(date(2024, 1, 7)) == "2024-01-07"


def test_month_grid_is_sunday_first_whole_weeks():
    weeks = month_grid(2024, 9)
    # September 2024 starts on a Sunday and ends on a Monday.
    assert weeks[0][0] == date(2024, 9, 1)
    assert weeks[-1][-1] == date(2024, 10, 5)
    assert len(weeks) == 5
    assert all(len(w) == 7 for w in weeks)


def test_month_grid_across_year_end_and_padding():
    weeks = month_grid(2024, 12)
    assert weeks[0][0] == date(2024, 12, 1)
    assert weeks[-1][-1] == date(2025, 1, 4)

    weeks = month_grid(2024, 8)
    assert weeks[0][0] == date(2024, 7, 28)


def test_week_days():
    days = week_days(date(2024, 9, 4))
    assert days[0] == date(2024, 9, 1)
    assert days[-1] == date(2024, 9, 7)


def test_re_expanding_expanded_days_is_stable():
    expanded = expand_blocks([_block("2024-09-02", "2024-09-04", "Moot court", tag="oral")])
    again = expand_blocks(list(expanded.values()))

    assert sorted(again) == ["2024-09-02", "2024-09-03", "2024-09-04"]
    assert {k: v.model_dump() for k, v in again.items()} == {k: v.model_dump() for k, v in expanded.items()}
