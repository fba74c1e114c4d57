#!/usr/bin/env python

"""Found/missed counts of truth sites grouped by their alt allele count.

The allele count of a site is the number of called chromosomes in the
validation record carrying any alternate allele. A site is 'found' if
the eval stream had a record at the same position, else 'missed'.
"""

from typing import Dict, Iterator, Tuple
from dataclasses import dataclass


@dataclass
class FrequencyStats:
    n_found: int = 0
    n_missed: int = 0

    @property
    def total(self) -> int:
        return self.n_found + self.n_missed

    @property
    def percent_found(self) -> float:
        return 0. if not self.total else 100. * self.n_found / self.total

    def __str__(self):
        return f"{self.n_found} {self.n_missed} {self.percent_found:.2f}"


class AlleleCountStats:
    """Mapping of true allele count -> FrequencyStats, filled lazily."""
    def __init__(self):
        self._stats: Dict[int, FrequencyStats] = {}

    def __len__(self) -> int:
        return len(self._stats)

    def __contains__(self, allele_count: int) -> bool:
        return allele_count in self._stats

    def __getitem__(self, allele_count: int) -> FrequencyStats:
        return self._stats[allele_count]

    def _get(self, allele_count: int) -> FrequencyStats:
        if allele_count < 0:
            raise ValueError(f"allele count cannot be negative: {allele_count}")
        if allele_count not in self._stats:
            self._stats[allele_count] = FrequencyStats()
        return self._stats[allele_count]

    def record_found(self, allele_count: int) -> None:
        self._get(allele_count).n_found += 1

    def record_missed(self, allele_count: int) -> None:
        self._get(allele_count).n_missed += 1

    def items(self) -> Iterator[Tuple[int, FrequencyStats]]:
        """Yield (allele_count, stats) in increasing allele count."""
        for allele_count in sorted(self._stats):
            yield allele_count, self._stats[allele_count]
