"""
Location lists bucketed by reading frame and target.

A target is normally a reference feature ID, but any string works. The
buckets are conceptually a map from (frame, target) to a SortedLocationList;
frames come first only for convenience, callers should rely on nothing but
the grouping.
"""
from __future__ import annotations

import bisect
from typing import Dict, Iterator, List, NamedTuple, Optional

from kmer_projector.locations.location import N_FRAMES, Location


def _sort_key(loc: Location):
    return (loc.contig_id, loc.left, loc.length)


class SortedLocationList:
    """Locations ordered by contig, then left edge, then length."""

    def __init__(self):
        self._locs: List[Location] = []

    def add(self, loc: Location) -> None:
        bisect.insort(self._locs, loc, key=_sort_key)

    def contig_range(self, i: int, max_edge: Optional[int] = None) -> Iterator[Location]:
        """
        Yield the locations after index `i` that sit on the same contig.

        With `max_edge`, the run stops at the first location starting at or past
        `max_edge` and only locations whose right edge is below it are yielded.
        """
        anchor = self._locs[i]
        for loc in self._locs[i + 1:]:
            if loc.contig_id != anchor.contig_id:
                break
            if max_edge is not None:
                if loc.left >= max_edge:
                    break
                if loc.right >= max_edge:
                    continue
            yield loc

    def __getitem__(self, i: int) -> Location:
        return self._locs[i]

    def __len__(self) -> int:
        return len(self._locs)

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locs)

    def __repr__(self) -> str:
        return f"SortedLocationList({len(self._locs)} locations)"


class LocationReport(NamedTuple):
    target_id: str
    locations: SortedLocationList


class FramedLocationLists:
    """Map of (frame, target) to sorted location lists, with a running count."""

    def __init__(self):
        self._master: List[Dict[str, SortedLocationList]] = [{} for _ in range(N_FRAMES)]
        self._count = 0

    def connect(self, target: str, loc: Location) -> None:
        """File `loc` under `target` in the bucket of its own frame."""
        bucket = self._master[loc.frame.idx]
        loc_list = bucket.get(target)
        if loc_list is None:
            loc_list = SortedLocationList()
            bucket[target] = loc_list
        loc_list.add(loc)
        self._count += 1

    def clear(self) -> None:
        for bucket in self._master:
            bucket.clear()
        self._count = 0

    def size(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[LocationReport]:
        for bucket in self._master:
            for target, loc_list in bucket.items():
                yield LocationReport(target, loc_list)
