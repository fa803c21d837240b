from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List

from .errors import LineIndexOutOfBoundsError


@dataclass
class CacheLine:
    """A single physical line. Blocks carry no payload, only bookkeeping."""
    line_number: int
    valid: bool = False
    dirty: bool = False
    tag: int = 0
    insertion_time: int = 0
    last_access_time: int = 0
    access_count: int = 0

    def matches(self, tag: int) -> bool:
        return self.valid and self.tag == tag

    def load_block(self, tag: int, time: int):
        """Fills the line with a new block at logical time `time`."""
        self.valid = True
        self.dirty = False
        self.tag = tag
        self.insertion_time = time
        self.last_access_time = time
        self.access_count = 0

    def record_access(self, time: int):
        self.last_access_time = time
        self.access_count += 1

    def invalidate(self):
        self.valid = False
        self.dirty = False
        self.tag = 0
        self.insertion_time = 0
        self.last_access_time = 0
        self.access_count = 0

    def snapshot(self) -> CacheLine:
        """Returns an independent copy that later accesses will not mutate."""
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "line": self.line_number,
            "valid": self.valid,
            "tag": self.tag,
            "insertion_time": self.insertion_time,
            "last_access_time": self.last_access_time,
            "access_count": self.access_count,
        }


class LineStore:
    """
    The lines of one cache plus the logical clock that orders them.

    Lines are kept in a flat list; for set layouts line i belongs to set
    i // associativity, way i % associativity.
    """
    def __init__(self, total_lines: int):
        self.lines: List[CacheLine] = [CacheLine(i) for i in range(total_lines)]
        self.clock = 0

    def __len__(self) -> int:
        return len(self.lines)

    def tick(self) -> int:
        """Advances the logical clock and returns the new time."""
        self.clock += 1
        return self.clock

    def get(self, index: int) -> CacheLine:
        if index < 0 or index >= len(self.lines):
            raise LineIndexOutOfBoundsError(
                f"Line index {index} out of range [0, {len(self.lines) - 1}]")
        return self.lines[index]

    def get_all(self) -> List[CacheLine]:
        return self.lines

    def slice_set(self, set_number: int, ways: int) -> List[CacheLine]:
        """Returns the `ways` contiguous lines forming set `set_number`."""
        start = set_number * ways
        return self.lines[start:start + ways]

    def invalidate_all(self):
        for line in self.lines:
            line.invalidate()
        self.clock = 0
