#!/usr/bin/env python

"""Genotype concordance between an eval and a validation (truth) call set.

A traversal engine calls `process(eval, validation)` once per site, in
order, with either record possibly None, and calls `finalize()` once
after the last site. Three statistics are collected:

1. per sample, counts of truth genotype vs called genotype.
2. per true allele count, the number of truth sites found or missed
   by the eval call set.
3. quality score histograms of true and false positive eval calls.

The per-sample tables are sized from the first eval record, so the
evaluator starts UNINITIALIZED and moves to ACTIVE on the first eval
record. Validation records seen before then are held in a bounded
buffer and replayed as missed sites on activation.

Examples
--------
>>> gc = GenotypeConcordance()
>>> for eval_site, truth_site in pairs:
...     gc.process(eval_site, truth_site)
>>> gc.finalize()
>>> gc.sample_stats.row("NA12878", GenotypeType.HET).percent_concordant
"""

from typing import Optional
from enum import Enum
from loguru import logger

from vareval.core.exceptions import VarEvalError
from vareval.schema.params_schema import ConcordanceParams
from vareval.concordance.genotypes import GenotypeType, VariantRecord, N_GENOTYPE_TYPES
from vareval.concordance.sample_stats import SampleStats
from vareval.concordance.frequency_stats import AlleleCountStats
from vareval.concordance.quality_histograms import QualityScoreHistograms
from vareval.concordance.pending import PendingValidationBuffer

logger = logger.bind(name="vareval")


class EvaluatorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"


def is_valid_vc(record: Optional[VariantRecord]) -> bool:
    """A record is usable as truth if present and not filtered."""
    return record is not None and not record.is_filtered()


class GenotypeConcordance:
    """Determine the genotype concordance between two call sets.

    Parameters
    ----------
    params: ConcordanceParams
        Buffer bound and histogram bin count. Defaults if None.
    """
    name = "genotypeConcordance"

    def __init__(self, params: Optional[ConcordanceParams] = None):
        self.params = params if params is not None else ConcordanceParams()
        self.state = EvaluatorState.UNINITIALIZED
        self.allele_count_stats = AlleleCountStats()
        self.quality_score_histograms = QualityScoreHistograms(self.params.num_bins)
        self._sample_stats: Optional[SampleStats] = None
        self._missed_validation_data = PendingValidationBuffer(
            self.params.max_missed_validation_data)
        self.nsites = 0

    @property
    def sample_stats(self) -> Optional[SampleStats]:
        """Per-sample concordance tables, None until the first eval site."""
        return self._sample_stats

    @property
    def n_dropped_validation(self) -> int:
        """Validation sites discarded because the pending buffer was full."""
        return self._missed_validation_data.n_dropped

    def process(
        self,
        eval_vc: Optional[VariantRecord],
        validation: Optional[VariantRecord],
    ) -> Optional[str]:
        """Update the statistics with one site. Never flags a site."""
        interesting = None

        # need at least eval data or usable validation data
        if eval_vc is None and not is_valid_vc(validation):
            return interesting

        if self.state == EvaluatorState.UNINITIALIZED:
            if eval_vc is None:
                self._missed_validation_data.add(validation)
                return interesting
            self._activate(eval_vc)

        self.update_stats(eval_vc, validation)
        return interesting

    def _activate(self, eval_vc: VariantRecord) -> None:
        """Create the sample tables and replay buffered validation sites."""
        self._sample_stats = SampleStats(eval_vc.sample_names(), N_GENOTYPE_TYPES)
        self.state = EvaluatorState.ACTIVE
        for record in self._missed_validation_data.drain():
            self.update_stats(None, record)
        logger.debug(f"concordance activated with samples {self._sample_stats.sample_names}")

    def update_stats(
        self,
        eval_vc: Optional[VariantRecord],
        validation: Optional[VariantRecord],
    ) -> None:
        """Record one (eval, validation) pair into all three statistics."""
        if self.state != EvaluatorState.ACTIVE:
            msg = "update_stats called before the first eval record was processed"
            logger.error(msg)
            raise VarEvalError(msg)
        validation_is_valid = is_valid_vc(validation)
        self.nsites += 1

        # genotype concordance per sample
        if eval_vc is not None:
            for sample in eval_vc.sample_names():
                called = eval_vc.genotype_type(sample)
                if validation_is_valid and validation.has_sample(sample):
                    truth = validation.genotype_type(sample)
                else:
                    truth = GenotypeType.NO_CALL
                self._sample_stats.incr_value(sample, truth, called)

        # no eval record, every sample is a no-call
        else:
            for sample in validation.sample_names():
                truth = validation.genotype_type(sample)
                self._sample_stats.incr_value(sample, truth, GenotypeType.NO_CALL)

        # found/missed by the true allele count
        if validation_is_valid and validation.is_polymorphic():
            true_allele_count = sum(
                count for _, count in validation.alternate_allele_chromosome_counts())
            if eval_vc is not None:
                self.allele_count_stats.record_found(true_allele_count)
            else:
                self.allele_count_stats.record_missed(true_allele_count)

        # TP & FP quality score histograms
        if eval_vc is not None and eval_vc.is_polymorphic() and validation_is_valid:
            samples = eval_vc.sample_names()
            if len(samples) == 1:
                sample = samples[0]
                if validation.has_sample(sample):
                    truth = validation.genotype_type(sample)
                    self.quality_score_histograms.incr_value(
                        eval_vc.phred_scaled_qual(), truth != GenotypeType.HOM_REF)
            else:
                self.quality_score_histograms.incr_value(
                    eval_vc.phred_scaled_qual(), validation.is_polymorphic())

    def finalize(self) -> None:
        """Bin the quality histograms. Call once after the last site."""
        if self.state == EvaluatorState.UNINITIALIZED:
            logger.warning(
                "no eval sites were seen; concordance tables are empty "
                f"({len(self._missed_validation_data)} validation sites pending)")
        if self.n_dropped_validation:
            logger.warning(
                f"{self.n_dropped_validation} validation sites were dropped "
                "before the first eval site and are not counted as missed")
        self.quality_score_histograms.organize_histogram_tables()
        logger.info(f"{self.name}: evaluated {self.nsites} sites")

    def __str__(self):
        return f"{self.name}: {self.state.value}, {self.nsites} sites"
