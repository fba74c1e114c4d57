#!/usr/bin/env python

"""Histograms of variant quality scores for true and false positive calls.

The range of quality scores is not known until every site has been
seen, so the raw scores are held in two lists during the traversal and
only binned when `organize_histogram_tables` is called at the end.
The binned arrays cannot be read before then.

Bins are `max_quality / (num_bins - 1)` wide, so the highest score
lands in the last bin. If every score is 0 (or there are none) the
bin size is 0 and all scores are put in bin 0.
"""

from typing import List
from enum import Enum
import numpy as np
from loguru import logger

from vareval.core.exceptions import VarEvalError

logger = logger.bind(name="vareval")


class HistogramState(str, Enum):
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


class QualityScoreHistograms:
    """True positive and false positive quality score histograms."""
    def __init__(self, num_bins: int = 20):
        if num_bins < 2:
            raise VarEvalError(f"num_bins must be at least 2, not {num_bins}")
        self.num_bins = num_bins
        self.state = HistogramState.ACCUMULATING
        self.true_positive_qualities: List[float] = []
        self.false_positive_qualities: List[float] = []
        self.max_quality = 0.
        self.bin_size = 0.
        self._true_positive_hist = np.zeros(num_bins, dtype=np.int64)
        self._false_positive_hist = np.zeros(num_bins, dtype=np.int64)

    def incr_value(self, qual: float, is_true_positive_call: bool) -> None:
        """Store a raw quality score. Invalidates any previous binning."""
        if is_true_positive_call:
            self.true_positive_qualities.append(float(qual))
        else:
            self.false_positive_qualities.append(float(qual))
        self.state = HistogramState.ACCUMULATING

    def organize_histogram_tables(self) -> None:
        """Bin the raw scores using the max score across both lists.

        The raw lists are never cleared so this can be re-run and
        always produces the same tables.
        """
        tpq = np.asarray(self.true_positive_qualities, dtype=np.float64)
        fpq = np.asarray(self.false_positive_qualities, dtype=np.float64)
        self.max_quality = float(max(
            tpq.max(initial=0.),
            fpq.max(initial=0.),
        ))
        self.bin_size = self.max_quality / (self.num_bins - 1)
        self._true_positive_hist = self._bin(tpq)
        self._false_positive_hist = self._bin(fpq)
        self.state = HistogramState.FINALIZED
        logger.debug(
            f"quality histograms binned: max_quality={self.max_quality:.2f} "
            f"bin_size={self.bin_size:.4f} ntp={tpq.size} nfp={fpq.size}")

    finalize = organize_histogram_tables

    def _bin(self, quals: np.ndarray) -> np.ndarray:
        if self.bin_size > 0:
            idxs = np.floor(quals / self.bin_size).astype(np.int64)
            idxs = np.clip(idxs, 0, self.num_bins - 1)
            # rounding can put max_quality just under the last bin edge
            idxs[quals >= self.max_quality] = self.num_bins - 1
        else:
            idxs = np.zeros(quals.size, dtype=np.int64)
        return np.bincount(idxs, minlength=self.num_bins).astype(np.int64)

    def _check_finalized(self) -> None:
        if self.state != HistogramState.FINALIZED:
            raise VarEvalError(
                "quality histograms are not binned until finalize() is called")

    @property
    def true_positive_hist(self) -> np.ndarray:
        self._check_finalized()
        return self._true_positive_hist.copy()

    @property
    def false_positive_hist(self) -> np.ndarray:
        self._check_finalized()
        return self._false_positive_hist.copy()

    def __str__(self):
        if self.state != HistogramState.FINALIZED:
            return (
                f"QualityScoreHistograms({self.state.value}, "
                f"ntp={len(self.true_positive_qualities)}, "
                f"nfp={len(self.false_positive_qualities)})")
        tps = " ".join(str(i) for i in self._true_positive_hist)
        fps = " ".join(str(i) for i in self._false_positive_hist)
        return f"TP: {tps}\nFP: {fps}"
