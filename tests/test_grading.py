import pytest

from qtype_ordering.core import grading
from qtype_ordering.core.grading import (
    END,
    count_correct,
    get_next_answerids,
    get_ordered_subset,
    get_previous_and_next_answerids,
    item_score,
)

CORRECT = [1, 2, 3, 4, 5, 6]
SWAPPED = [1, 2, 3, 5, 4, 6]


def test_get_next_answerids():
    assert get_next_answerids([1, 2, 3]) == {1: 2, 2: 3}
    assert get_next_answerids([1, 2, 3], lastitem=True) == {1: 2, 2: 3, 3: END}
    assert get_next_answerids([]) == {}


def test_get_previous_and_next_answerids():
    assert get_previous_and_next_answerids([1, 2, 3]) == {
        1: ([END], [2]),
        2: ([1], [3]),
        3: ([2], [END]),
    }
    assert get_previous_and_next_answerids([1, 2, 3], all_items=True) == {
        1: ([], [2, 3]),
        2: ([1], [3]),
        3: ([2, 1], []),
    }


def test_get_ordered_subset():
    assert get_ordered_subset([0, 2, 1, 3], contiguous=False) == [0, 1, 3]
    assert get_ordered_subset([3, 0, 1, 2], contiguous=True) == [1, 2, 3]
    # không có cặp liên tiếp nào -> không tính
    assert get_ordered_subset([0, 2, 1, 3], contiguous=True) == []
    assert get_ordered_subset([None, 1, None], contiguous=False) == []


@pytest.mark.parametrize("gradingtype,expected", [
    (grading.GRADING_ALL_OR_NOTHING, 0.0),
    (grading.GRADING_ABSOLUTE_POSITION, 4 / 6),
    (grading.GRADING_RELATIVE_NEXT_EXCLUDE_LAST, 2 / 5),
    (grading.GRADING_RELATIVE_NEXT_INCLUDE_LAST, 3 / 6),
    (grading.GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT, 6 / 12),
    (grading.GRADING_LONGEST_ORDERED_SUBSET, 5 / 6),
    (grading.GRADING_LONGEST_CONTIGUOUS_SUBSET, 3 / 6),
    (grading.GRADING_RELATIVE_TO_CORRECT, 28 / 30),
])
def test_grade_two_items_swapped(gradingtype, expected):
    assert grading.grade(gradingtype, CORRECT, SWAPPED) == pytest.approx(expected)


@pytest.mark.parametrize("gradingtype", [
    grading.GRADING_ALL_OR_NOTHING,
    grading.GRADING_ABSOLUTE_POSITION,
    grading.GRADING_RELATIVE_NEXT_EXCLUDE_LAST,
    grading.GRADING_RELATIVE_NEXT_INCLUDE_LAST,
    grading.GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT,
    grading.GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT,
    grading.GRADING_LONGEST_ORDERED_SUBSET,
    grading.GRADING_LONGEST_CONTIGUOUS_SUBSET,
    grading.GRADING_RELATIVE_TO_CORRECT,
])
def test_correct_order_scores_full_marks(gradingtype):
    assert grading.grade(gradingtype, CORRECT, list(CORRECT)) == pytest.approx(1.0)


def test_reversed_order_has_no_ordered_subset():
    assert grading.grade(grading.GRADING_LONGEST_ORDERED_SUBSET, CORRECT, CORRECT[::-1]) == 0.0


def test_no_answers_grades_zero():
    assert grading.grade(grading.GRADING_ABSOLUTE_POSITION, [], []) == 0.0


def test_unknown_grading_type():
    with pytest.raises(ValueError):
        count_correct(99, CORRECT, SWAPPED)
    with pytest.raises(ValueError):
        item_score(99, CORRECT, SWAPPED, 0, 1)


def test_item_scores():
    assert item_score(grading.GRADING_ABSOLUTE_POSITION, CORRECT, SWAPPED, 3, 5) == (0, 1, 0.0)
    assert item_score(grading.GRADING_ABSOLUTE_POSITION, CORRECT, SWAPPED, 0, 1) == (1, 1, 1.0)
    assert item_score(grading.GRADING_RELATIVE_TO_CORRECT, CORRECT, SWAPPED, 3, 5) == (4, 5, 0.8)
    assert item_score(grading.GRADING_LONGEST_CONTIGUOUS_SUBSET, CORRECT, SWAPPED, 3, 5) == (0, 1, 0.0)
    assert item_score(grading.GRADING_LONGEST_CONTIGUOUS_SUBSET, CORRECT, SWAPPED, 1, 2) == (1, 1, 1.0)
    # mục cuối không tính khi bỏ mục cuối
    assert item_score(grading.GRADING_RELATIVE_NEXT_EXCLUDE_LAST, CORRECT, SWAPPED, 5, 6) == (0, None, 0.0)
    assert item_score(grading.GRADING_ALL_OR_NOTHING, CORRECT, SWAPPED, 0, 1) == (0, 0, 1.0)
