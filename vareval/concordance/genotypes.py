#!/usr/bin/env python

"""Genotype categories and the variant record interface.

The concordance evaluator does not parse VCF itself. It only needs a
small read-only view of each record, described by the VariantRecord
protocol below. `Site` implements it from plain python values and is
what the tests use; `vareval.vcf.PysamSite` implements it on top of
pysam records.
"""

from typing import Dict, Tuple, Sequence, Protocol, Optional
from dataclasses import dataclass, field
from enum import IntEnum


class GenotypeType(IntEnum):
    """Genotype categories; the value is the matrix index."""
    NO_CALL = 0
    HOM_REF = 1
    HET = 2
    HOM_VAR = 3

    @classmethod
    def from_alleles(cls, alleles: Sequence[Optional[int]]) -> "GenotypeType":
        """Classify a genotype from its allele indices (0 = reference).

        >>> GenotypeType.from_alleles((0, 1))
        <GenotypeType.HET: 2>
        >>> GenotypeType.from_alleles((None, 1))
        <GenotypeType.NO_CALL: 0>
        """
        if not alleles or any(i is None for i in alleles):
            return cls.NO_CALL
        if len(set(alleles)) > 1:
            return cls.HET
        if alleles[0] == 0:
            return cls.HOM_REF
        return cls.HOM_VAR


N_GENOTYPE_TYPES = len(GenotypeType)


class VariantRecord(Protocol):
    """Read-only view of one call set at one site."""

    def sample_names(self) -> Sequence[str]:
        ...

    def genotype_type(self, sample: str) -> GenotypeType:
        ...

    def has_sample(self, sample: str) -> bool:
        ...

    def is_filtered(self) -> bool:
        ...

    def is_polymorphic(self) -> bool:
        ...

    def phred_scaled_qual(self) -> float:
        ...

    def alternate_allele_chromosome_counts(self) -> Sequence[Tuple[str, int]]:
        ...


@dataclass(frozen=True)
class Site:
    """A VariantRecord built from python values.

    Examples
    --------
    >>> site = Site(
    ...     genotypes={"A": (0, 1), "B": (1, 1)},
    ...     alts=("T",),
    ...     qual=50.,
    ... )
    >>> site.genotype_type("B")
    <GenotypeType.HOM_VAR: 3>
    >>> site.alternate_allele_chromosome_counts()
    (('T', 3),)
    """
    genotypes: Dict[str, Tuple[Optional[int], ...]] = field(default_factory=dict)
    """: sample name -> allele indices, None for a missing allele."""
    alts: Tuple[str, ...] = ()
    """: alternate alleles; index i+1 in the genotypes."""
    qual: float = 0.
    """: phred scaled site quality."""
    filters: Tuple[str, ...] = ()
    """: failed filter names. Empty or ('PASS',) means unfiltered."""
    contig: str = "1"
    pos: int = 0

    def sample_names(self) -> Tuple[str, ...]:
        return tuple(self.genotypes)

    def genotype_type(self, sample: str) -> GenotypeType:
        return GenotypeType.from_alleles(self.genotypes[sample])

    def has_sample(self, sample: str) -> bool:
        return sample in self.genotypes

    def is_filtered(self) -> bool:
        return any(i != "PASS" for i in self.filters)

    def is_polymorphic(self) -> bool:
        """True if any alternate allele is present.

        Without genotypes this is decided by the ALT column alone,
        otherwise at least one called chromosome must carry an alt.
        """
        if not self.alts:
            return False
        if not self.genotypes:
            return True
        return any(count for _, count in self.alternate_allele_chromosome_counts())

    def phred_scaled_qual(self) -> float:
        return float(self.qual)

    def alternate_allele_chromosome_counts(self) -> Tuple[Tuple[str, int], ...]:
        counts = [0] * len(self.alts)
        for alleles in self.genotypes.values():
            for idx in alleles:
                if idx:
                    counts[idx - 1] += 1
        return tuple(zip(self.alts, counts))
