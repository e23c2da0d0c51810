"""Line-level diff between two texts.

The diff is a shortest edit script over whole lines computed with the
linear-space variant of Myers' O(ND) algorithm. The result is a list of
segments tagged ``unchanged``, ``added`` or ``removed`` such that:

- joining the ``unchanged`` and ``removed`` segments gives the old text;
- joining the ``unchanged`` and ``added`` segments gives the new text.

Within a change hunk removed lines come before added lines.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

UNCHANGED = "unchanged"
ADDED = "added"
REMOVED = "removed"


@dataclass(frozen=True)
class LineSegment:
    """A run of consecutive lines sharing one tag."""

    tag: str
    lines: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "".join(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


def split_lines(text: str) -> List[str]:
    """Split text into lines, keeping each line's terminator.

    Only ``\\n`` ends a line. A trailing line without a terminator is kept as
    its own line; the empty string has no lines.

    Example:
        >>> split_lines("a\\nb")
        ['a\\n', 'b']
    """
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def diff_lines(old: str, new: str) -> List[LineSegment]:
    """Compute the line diff between ``old`` and ``new``.

    Args:
        old: Previous text
        new: Current text

    Returns:
        Ordered segments covering every line of both inputs
    """
    a = split_lines(old)
    b = split_lines(new)

    ops: List[Tuple[str, str]] = []
    i = j = 0
    for match_a, match_b in _lcs_matches(a, b):
        ops.extend((REMOVED, line) for line in a[i:match_a])
        ops.extend((ADDED, line) for line in b[j:match_b])
        ops.append((UNCHANGED, a[match_a]))
        i, j = match_a + 1, match_b + 1
    ops.extend((REMOVED, line) for line in a[i:])
    ops.extend((ADDED, line) for line in b[j:])

    return _build_segments(ops)


def diff_stats(segments: Sequence[LineSegment]) -> Tuple[int, int]:
    """Return the number of (added, removed) lines in ``segments``."""
    added = sum(len(s) for s in segments if s.tag == ADDED)
    removed = sum(len(s) for s in segments if s.tag == REMOVED)
    return added, removed


def _lcs_matches(a: Sequence[str], b: Sequence[str]) -> List[Tuple[int, int]]:
    """Index pairs of a longest common subsequence of ``a`` and ``b``."""
    # A line missing from the other side can never be matched
    in_a = set(a)
    in_b = set(b)
    a_index = [i for i, line in enumerate(a) if line in in_b]
    b_index = [j for j, line in enumerate(b) if line in in_a]
    a_kept = [a[i] for i in a_index]
    b_kept = [b[j] for j in b_index]

    matches: List[Tuple[int, int]] = []
    _collect(a_kept, 0, len(a_kept), b_kept, 0, len(b_kept), matches)
    return [(a_index[i], b_index[j]) for i, j in matches]


def _collect(
    a: Sequence[str],
    a_lo: int,
    a_hi: int,
    b: Sequence[str],
    b_lo: int,
    b_hi: int,
    matches: List[Tuple[int, int]],
) -> None:
    """Append the matched pairs of a[a_lo:a_hi] and b[b_lo:b_hi] in order."""
    # Common prefix and suffix are unchanged in every shortest script
    while a_lo < a_hi and b_lo < b_hi and a[a_lo] == b[b_lo]:
        matches.append((a_lo, b_lo))
        a_lo += 1
        b_lo += 1

    tail: List[Tuple[int, int]] = []
    while a_lo < a_hi and b_lo < b_hi and a[a_hi - 1] == b[b_hi - 1]:
        a_hi -= 1
        b_hi -= 1
        tail.append((a_hi, b_hi))

    if a_lo < a_hi and b_lo < b_hi:
        split = _bisect(a, a_lo, a_hi, b, b_lo, b_hi)
        if split is not None:
            x, y = split
            _collect(a, a_lo, x, b, b_lo, y, matches)
            _collect(a, x, a_hi, b, y, b_hi, matches)

    matches.extend(reversed(tail))


def _bisect(
    a: Sequence[str],
    a_lo: int,
    a_hi: int,
    b: Sequence[str],
    b_lo: int,
    b_hi: int,
) -> Optional[Tuple[int, int]]:
    """Find where the forward and reverse Myers searches meet.

    Runs both searches one edit at a time, keeping only the furthest
    x reached on each diagonal, so memory stays linear in the input.

    Returns:
        Absolute (x, y) split point, or None if the ranges share no line
    """
    n = a_hi - a_lo
    m = b_hi - b_lo
    max_d = (n + m + 1) // 2
    offset = max_d
    size = 2 * max_d + 2
    v1 = [-1] * size
    v2 = [-1] * size
    v1[offset + 1] = 0
    v2[offset + 1] = 0
    delta = n - m
    # With an odd delta the forward search detects the overlap
    front = delta % 2 != 0

    # Diagonals that ran off the grid are skipped on later passes
    k1start = k1end = k2start = k2end = 0

    for d in range(max_d):
        for k1 in range(-d + k1start, d + 1 - k1end, 2):
            k1_offset = offset + k1
            if k1 == -d or (k1 != d and v1[k1_offset - 1] < v1[k1_offset + 1]):
                x1 = v1[k1_offset + 1]
            else:
                x1 = v1[k1_offset - 1] + 1
            y1 = x1 - k1
            while x1 < n and y1 < m and a[a_lo + x1] == b[b_lo + y1]:
                x1 += 1
                y1 += 1
            v1[k1_offset] = x1
            if x1 > n:
                k1end += 2
            elif y1 > m:
                k1start += 2
            elif front:
                k2_offset = offset + delta - k1
                if 0 <= k2_offset < size and v2[k2_offset] != -1:
                    if x1 >= n - v2[k2_offset]:
                        return a_lo + x1, b_lo + y1

        for k2 in range(-d + k2start, d + 1 - k2end, 2):
            k2_offset = offset + k2
            if k2 == -d or (k2 != d and v2[k2_offset - 1] < v2[k2_offset + 1]):
                x2 = v2[k2_offset + 1]
            else:
                x2 = v2[k2_offset - 1] + 1
            y2 = x2 - k2
            while x2 < n and y2 < m and a[a_hi - x2 - 1] == b[b_hi - y2 - 1]:
                x2 += 1
                y2 += 1
            v2[k2_offset] = x2
            if x2 > n:
                k2end += 2
            elif y2 > m:
                k2start += 2
            elif not front:
                k1_offset = offset + delta - k2
                if 0 <= k1_offset < size and v1[k1_offset] != -1:
                    x1 = v1[k1_offset]
                    if x1 >= n - x2:
                        return a_lo + x1, b_lo + x1 - (k1_offset - offset)

    return None


def _build_segments(ops: List[Tuple[str, str]]) -> List[LineSegment]:
    """Merge (tag, line) pairs into segments, removals first in each hunk."""
    segments: List[LineSegment] = []
    removed: List[str] = []
    added: List[str] = []
    unchanged: List[str] = []

    def flush_hunk() -> None:
        if removed:
            segments.append(LineSegment(REMOVED, tuple(removed)))
            removed.clear()
        if added:
            segments.append(LineSegment(ADDED, tuple(added)))
            added.clear()

    for tag, line in ops:
        if tag == UNCHANGED:
            flush_hunk()
            unchanged.append(line)
            continue

        if unchanged:
            segments.append(LineSegment(UNCHANGED, tuple(unchanged)))
            unchanged.clear()
        if tag == REMOVED:
            removed.append(line)
        else:
            added.append(line)

    flush_hunk()
    if unchanged:
        segments.append(LineSegment(UNCHANGED, tuple(unchanged)))

    return segments
