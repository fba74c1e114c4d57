#!/usr/bin/env python

"""Bounded holding area for validation sites seen before any eval site.

The concordance tables cannot be created until the first eval record
tells us which samples are being evaluated. Validation records that
arrive earlier are kept here and replayed as 'missed' sites once the
tables exist. To keep memory bounded (e.g., exome eval calls against
genome-wide truth calls) at most `capacity` records are kept; later
ones are dropped with a single warning. Dropping degrades the
completeness of the missed counts, it is not an error.
"""

from typing import List
from loguru import logger

from vareval.core.exceptions import VarEvalError
from vareval.concordance.genotypes import VariantRecord

logger = logger.bind(name="vareval")


class PendingValidationBuffer:
    """Fixed capacity list of records, usable until drained once."""
    def __init__(self, capacity: int = 10_000):
        self.capacity = capacity
        self.n_dropped = 0
        self.exhausted = False
        self._warned = False
        self._records: List[VariantRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: VariantRecord) -> bool:
        """Keep the record if there is room. Returns True if kept."""
        if self.exhausted:
            raise VarEvalError("pending validation buffer was already replayed")
        if len(self._records) < self.capacity:
            self._records.append(record)
            return True
        if not self._warned:
            logger.warning(
                f"More than {self.capacity} validation sites seen before the "
                "first eval site appeared; dropping further sites.")
            self._warned = True
        self.n_dropped += 1
        return False

    def drain(self) -> List[VariantRecord]:
        """Return every kept record in arrival order and disable the buffer."""
        if self.exhausted:
            raise VarEvalError("pending validation buffer was already replayed")
        records, self._records = self._records, []
        self.exhausted = True
        if records:
            logger.debug(f"replaying {len(records)} validation sites seen before the first eval site")
        return records
