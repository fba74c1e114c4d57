#!/usr/bin/env python

"""Pydantic schemas for concordance params and serialized reports."""

from vareval.schema.params_schema import ConcordanceParams
from vareval.schema.report_schema import (
    ConcordanceRow,
    SampleConcordance,
    AlleleCountFrequency,
    QualityHistograms,
    ConcordanceReport,
)
