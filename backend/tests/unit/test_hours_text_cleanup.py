from antiques_trail.domain.maintenance.hours import remap_days, standardize_hours_text


def test_remap_days_shifts_one_to_seven_numbering() -> None:
    assert remap_days([1, 2, 7]) == {1: 1, 2: 2, 7: 0}


def test_remap_days_leaves_valid_numbering_alone() -> None:
    assert remap_days([0, 3, 6]) == {0: 0, 3: 3, 6: 6}


def test_remap_days_falls_back_to_sort_order() -> None:
    assert remap_days([10, 11, 12]) == {10: 0, 11: 1, 12: 2}


def test_standardize_reorders_monday_first_and_merges() -> None:
    text = "Sun: closed; Sat: 10ish till late, Mon-Fri: 10ish till late; phone ahead"
    assert standardize_hours_text(text) == "Monday to Saturday: 10ish till late\nSunday: closed\nphone ahead"
