#!/usr/bin/env python

"""A table of sample names to genotype concordance counts.

Each sample holds a square matrix of counts indexed by
[truth genotype][called genotype]. The set of samples is fixed when
the table is created from the first evaluation record and never
grows afterwards.
"""

from typing import Dict, Iterable, Iterator, Tuple
import numpy as np
from loguru import logger

from vareval.core.exceptions import SampleSetError
from vareval.concordance.genotypes import GenotypeType, N_GENOTYPE_TYPES
from vareval.schema.report_schema import ConcordanceRow

logger = logger.bind(name="vareval")

# truth categories reported as rows (no-call truth is not reported)
REPORTED_TRUTH = (GenotypeType.HOM_REF, GenotypeType.HET, GenotypeType.HOM_VAR)


class SampleStats:
    """Per-sample truth x called confusion matrices.

    Parameters
    ----------
    sample_names: Iterable[str]
        The samples of the first evaluation record. Fixed forever.
    n_genotype_types: int
        Size of each axis of the matrices.
    """
    def __init__(self, sample_names: Iterable[str], n_genotype_types: int = N_GENOTYPE_TYPES):
        self.n_genotype_types = n_genotype_types
        self._counts: Dict[str, np.ndarray] = {
            sample: np.zeros((n_genotype_types, n_genotype_types), dtype=np.int64)
            for sample in sample_names
        }
        logger.debug(f"concordance table created for {len(self._counts)} samples")

    def __contains__(self, sample: str) -> bool:
        return sample in self._counts

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    @property
    def sample_names(self) -> Tuple[str, ...]:
        return tuple(self._counts)

    def incr_value(self, sample: str, truth: GenotypeType, called: GenotypeType) -> None:
        """Increment the [truth][called] count of a sample.

        Raises SampleSetError if the sample was not present in the
        record used to create this table.
        """
        try:
            counts = self._counts[sample]
        except KeyError:
            msg = (
                f"Sample {sample} has not been seen in a previous eval; this "
                "analysis assumes that all samples are present in each "
                "variant record")
            logger.error(msg)
            raise SampleSetError(msg) from None
        counts[int(truth), int(called)] += 1

    def get_counts(self, sample: str) -> np.ndarray:
        """Return a copy of the count matrix of a sample."""
        return self._counts[sample].copy()

    def row(self, sample: str, truth: GenotypeType) -> ConcordanceRow:
        """Return totals and agreement for one truth category of a sample.

        Discordant counts are ordered by called category with no-call
        first, skipping the diagonal.
        """
        truth = GenotypeType(truth)
        counts = self._counts[sample][int(truth)]
        total = int(counts.sum())
        n_concordant = int(counts[int(truth)])
        return ConcordanceRow(
            truth=truth.name,
            total=total,
            n_concordant=n_concordant,
            percent_concordant=0. if not total else 100. * n_concordant / total,
            discordant={
                called.name: int(counts[int(called)])
                for called in GenotypeType
                if called != truth and int(called) < self.n_genotype_types
            },
        )

    def rows(self, sample: str) -> Dict[str, ConcordanceRow]:
        """The reported truth rows (ref, het, hom) of one sample."""
        return {truth.name: self.row(sample, truth) for truth in REPORTED_TRUTH}
