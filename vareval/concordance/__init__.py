#!/usr/bin/env python

"""Genotype concordance evaluation of an eval call set against truth."""

from vareval.concordance.genotypes import GenotypeType, VariantRecord, Site
from vareval.concordance.sample_stats import SampleStats
from vareval.concordance.frequency_stats import FrequencyStats, AlleleCountStats
from vareval.concordance.quality_histograms import QualityScoreHistograms, HistogramState
from vareval.concordance.pending import PendingValidationBuffer
from vareval.concordance.genotype_concordance import GenotypeConcordance, EvaluatorState
