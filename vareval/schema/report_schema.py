#!/usr/bin/env python

"""Serializable JSON schema for a finished concordance evaluation.

REPORT JSON SCHEMA:
-------------------
{
    params: {max_missed_validation_data: 10000, num_bins: 20},
    n_dropped_validation: 0,
    samples: {
        NA12878: {
            HOM_REF: {total: 10, n_concordant: 8, percent_concordant: 80.0,
                      discordant: {NO_CALL: 0, HET: 2, HOM_VAR: 0}},
            HET: {...},
            HOM_VAR: {...},
        },
    },
    allele_counts: [
        {allele_count: 1, n_found: 1, n_missed: 0, percent_found: 100.0},
    ],
    histograms: {
        max_quality: 20.0, bin_size: 1.05,
        true_positive: [1, 0, ...], false_positive: [0, 0, ...],
    },
}
"""

from typing import Dict, List
from pydantic import BaseModel
from vareval.schema.params_schema import ConcordanceParams

__all__ = [
    "ConcordanceRow",
    "SampleConcordance",
    "AlleleCountFrequency",
    "QualityHistograms",
    "ConcordanceReport",
]


class ConcordanceRow(BaseModel):
    """Derived view of one truth row of a sample's confusion matrix."""
    truth: str
    total: int = 0
    n_concordant: int = 0
    percent_concordant: float = 0.
    discordant: Dict[str, int] = {}
    """: called category name -> count, NO_CALL first."""


class SampleConcordance(BaseModel):
    name: str
    rows: Dict[str, ConcordanceRow] = {}


class AlleleCountFrequency(BaseModel):
    allele_count: int
    n_found: int = 0
    n_missed: int = 0
    percent_found: float = 0.


class QualityHistograms(BaseModel):
    max_quality: float = 0.
    bin_size: float = 0.
    true_positive: List[int] = []
    false_positive: List[int] = []


class ConcordanceReport(BaseModel):
    """The full set of results reported by GenotypeConcordance."""
    params: ConcordanceParams = ConcordanceParams()
    n_dropped_validation: int = 0
    samples: Dict[str, SampleConcordance] = {}
    allele_counts: List[AlleleCountFrequency] = []
    histograms: QualityHistograms = QualityHistograms()

    def __str__(self):
        return self.model_dump_json(indent=2)
