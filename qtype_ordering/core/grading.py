# -*- coding: utf-8 -*-
"""
Grading types for ordering questions.

Each function works on plain lists of answer ids, where the list index is the
position of the item. `correct` is the reference order, `current` the order
submitted by the student.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

GRADING_ALL_OR_NOTHING = -1
GRADING_ABSOLUTE_POSITION = 0
GRADING_RELATIVE_NEXT_EXCLUDE_LAST = 1
GRADING_RELATIVE_NEXT_INCLUDE_LAST = 2
GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT = 3
GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT = 4
GRADING_LONGEST_ORDERED_SUBSET = 5
GRADING_LONGEST_CONTIGUOUS_SUBSET = 6
GRADING_RELATIVE_TO_CORRECT = 7

# Sentinel for "no previous/next item". Answer ids start at 1.
END = 0

PrevNext = Tuple[List[int], List[int]]


def get_next_answerids(answerids: Sequence[int], lastitem: bool = False) -> Dict[int, int]:
    """Map each id to the id that follows it.

    With `lastitem` the final id maps to END, otherwise it is left out.
    """
    nextids: Dict[int, int] = {}
    ids = list(answerids)
    if not ids:
        return nextids
    for i, thisid in enumerate(ids[:-1]):
        nextids[thisid] = ids[i + 1]
    if lastitem:
        nextids[ids[-1]] = END
    return nextids


def get_previous_and_next_answerids(answerids: Sequence[int], all_items: bool = False) -> Dict[int, PrevNext]:
    """Map each id to its (previous ids, next ids).

    Without `all_items` only the immediate neighbours are kept, END standing in for
    a missing neighbour at either end.
    """
    ids = list(answerids)
    out: Dict[int, PrevNext] = {}
    for i, thisid in enumerate(ids):
        prev = list(reversed(ids[:i]))
        nxt = ids[i + 1:]
        if all_items:
            out[thisid] = (prev, nxt)
        else:
            out[thisid] = ([prev[0] if prev else END], [nxt[0] if nxt else END])
    return out


def get_ordered_subset(positions: Sequence[Optional[int]], contiguous: bool) -> List[int]:
    """Longest subset of the response whose items are in correct relative order.

    `positions[i]` is the correct position of the item shown at position i
    (None when the item is not part of the correct response). Returns the
    response positions making up the subset. Subsets of fewer than two items
    do not count.
    """
    n = len(positions)
    best: List[int] = []

    if contiguous:
        run: List[int] = []
        for i, p in enumerate(positions):
            if p is not None and run and positions[run[-1]] + 1 == p:
                run.append(i)
            else:
                run = [i] if p is not None else []
            if len(run) > len(best):
                best = list(run)
    else:
        # longest strictly increasing subsequence, O(n^2) is plenty here
        length = [0] * n
        parent: List[Optional[int]] = [None] * n
        for i, p in enumerate(positions):
            if p is None:
                continue
            length[i] = 1
            for j in range(i):
                q = positions[j]
                if q is not None and q < p and length[j] + 1 > length[i]:
                    length[i] = length[j] + 1
                    parent[i] = j
        end = None
        for i in range(n):
            if length[i] and (end is None or length[i] > length[end]):
                end = i
        while end is not None:
            best.append(end)
            end = parent[end]
        best.reverse()

    if len(best) < 2:
        return []
    return best


def _subset_positions(correct: Sequence[int], current: Sequence[int], contiguous: bool) -> List[int]:
    index = {answerid: pos for pos, answerid in enumerate(correct)}
    return get_ordered_subset([index.get(answerid) for answerid in current], contiguous)


# ========= Whole-response grading =========
def count_correct(gradingtype: int, correct: Sequence[int], current: Sequence[int]) -> Tuple[int, int]:
    """Return (countcorrect, countanswers) for a response."""
    countcorrect = 0
    countanswers = 0

    if gradingtype in (GRADING_ALL_OR_NOTHING, GRADING_ABSOLUTE_POSITION):
        for position, answerid in enumerate(correct):
            if position < len(current) and current[position] == answerid:
                countcorrect += 1
            countanswers += 1
        if gradingtype == GRADING_ALL_OR_NOTHING and countcorrect < countanswers:
            countcorrect = 0

    elif gradingtype in (GRADING_RELATIVE_NEXT_EXCLUDE_LAST, GRADING_RELATIVE_NEXT_INCLUDE_LAST):
        lastitem = gradingtype == GRADING_RELATIVE_NEXT_INCLUDE_LAST
        currentinfo = get_next_answerids(current, lastitem)
        correctinfo = get_next_answerids(correct, lastitem)
        for answerid, nextid in correctinfo.items():
            if answerid in currentinfo and currentinfo[answerid] == nextid:
                countcorrect += 1
            countanswers += 1

    elif gradingtype in (GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT, GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT):
        all_items = gradingtype == GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT
        currentinfo = get_previous_and_next_answerids(current, all_items)
        correctinfo = get_previous_and_next_answerids(correct, all_items)
        for answerid, (prev, nxt) in correctinfo.items():
            if answerid in currentinfo:
                curprev, curnext = currentinfo[answerid]
                countcorrect += len(set(curprev) & set(prev))
                countcorrect += len(set(curnext) & set(nxt))
            countanswers += len(prev) + len(nxt)

    elif gradingtype in (GRADING_LONGEST_ORDERED_SUBSET, GRADING_LONGEST_CONTIGUOUS_SUBSET):
        contiguous = gradingtype == GRADING_LONGEST_CONTIGUOUS_SUBSET
        countcorrect = len(_subset_positions(correct, current, contiguous))
        countanswers = len(correct)

    elif gradingtype == GRADING_RELATIVE_TO_CORRECT:
        count = len(correct) - 1
        currentpos = {answerid: pos for pos, answerid in enumerate(current)}
        for position, answerid in enumerate(correct):
            if answerid in currentpos:
                score = count - abs(position - currentpos[answerid])
                if score > 0:
                    countcorrect += score
            countanswers += count

    else:
        raise ValueError(f"Unknown grading type: {gradingtype}")

    return countcorrect, countanswers


def grade(gradingtype: int, correct: Sequence[int], current: Sequence[int]) -> float:
    countcorrect, countanswers = count_correct(gradingtype, correct, current)
    if countanswers == 0:
        return 0.0
    return countcorrect / countanswers


# ========= Per-item scores =========
def item_score(gradingtype: int, correct: Sequence[int], current: Sequence[int],
               position: int, answerid: int) -> Tuple[float, Optional[float], float]:
    """Return (score, maxscore, fraction) for the item at `position`.

    maxscore is None when the item is not scored under this grading type.
    """
    score: float = 0
    maxscore: Optional[float] = None

    if gradingtype == GRADING_ALL_OR_NOTHING:
        # no partial credit per item; the fraction only drives the highlight
        if position < len(correct):
            return 0, 0, (1.0 if correct[position] == answerid else 0.0)
        return 0, None, 0.0

    if gradingtype == GRADING_ABSOLUTE_POSITION:
        if position < len(correct):
            if correct[position] == answerid:
                score = 1
            maxscore = 1

    elif gradingtype in (GRADING_RELATIVE_NEXT_EXCLUDE_LAST, GRADING_RELATIVE_NEXT_INCLUDE_LAST):
        lastitem = gradingtype == GRADING_RELATIVE_NEXT_INCLUDE_LAST
        correctinfo = get_next_answerids(correct, lastitem)
        currentinfo = get_next_answerids(current, lastitem)
        if answerid in correctinfo:
            if answerid in currentinfo and currentinfo[answerid] == correctinfo[answerid]:
                score = 1
            maxscore = 1

    elif gradingtype in (GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT, GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT):
        all_items = gradingtype == GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT
        correctinfo = get_previous_and_next_answerids(correct, all_items)
        currentinfo = get_previous_and_next_answerids(current, all_items)
        if answerid in correctinfo:
            prev, nxt = correctinfo[answerid]
            maxscore = len(prev) + len(nxt)
            if answerid in currentinfo:
                curprev, curnext = currentinfo[answerid]
                score = len(set(prev) & set(curprev)) + len(set(nxt) & set(curnext))

    elif gradingtype in (GRADING_LONGEST_ORDERED_SUBSET, GRADING_LONGEST_CONTIGUOUS_SUBSET):
        contiguous = gradingtype == GRADING_LONGEST_CONTIGUOUS_SUBSET
        if answerid in correct:
            if position in _subset_positions(correct, current, contiguous):
                score = 1
            maxscore = 1

    elif gradingtype == GRADING_RELATIVE_TO_CORRECT:
        if answerid in correct:
            maxscore = len(correct) - 1
            score = max(0, maxscore - abs(list(correct).index(answerid) - position))

    else:
        raise ValueError(f"Unknown grading type: {gradingtype}")

    if not maxscore:
        return score, maxscore, 0.0
    return score, maxscore, score / maxscore
