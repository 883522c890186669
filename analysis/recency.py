"""Single backward pass that tracks how recently and how often keys were drawn."""

import datetime as dt
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Optional, Tuple


@dataclass
class RecencyTrack:
    """Running state for one key during the recency scan."""
    appearances: int = 0
    first_index: Optional[int] = None
    last_index: Optional[int] = None
    gaps: List[int] = field(default_factory=list)
    last_date: Optional[dt.date] = None

    def record(self, index: int, when: dt.date) -> None:
        if self.first_index is None:
            self.first_index = index
            self.last_date = when
        else:
            self.gaps.append(index - self.last_index)
        self.last_index = index
        self.appearances += 1

    def skip(self, total_draws: int) -> int:
        """Draws since the most recent appearance, ``total_draws`` if never seen."""
        return total_draws if self.first_index is None else self.first_index

    @property
    def average_gap(self) -> float:
        return sum(self.gaps) / len(self.gaps) if self.gaps else 0.0

    @property
    def max_gap(self) -> int:
        return max(self.gaps) if self.gaps else 0

    @property
    def min_gap(self) -> int:
        return min(self.gaps) if self.gaps else 0


def scan_recency(keyed_draws: Iterable[Tuple[dt.date, Iterable[Hashable]]]) -> Dict[Hashable, RecencyTrack]:
    """Scan draws ordered most recent first.

    Each element pairs a draw date with the keys that draw produced (a number,
    or every pattern label the number matched). Index 0 is the most recent draw
    and gaps are index differences between consecutive appearances, so a key
    drawn in two adjacent draws has a gap of 1.
    """
    tracks: Dict[Hashable, RecencyTrack] = {}
    for index, (when, keys) in enumerate(keyed_draws):
        for key in set(keys):
            track = tracks.get(key)
            if track is None:
                track = tracks[key] = RecencyTrack()
            track.record(index, when)
    return tracks
