#!/usr/bin/env python

"""Convert pysam VariantRecords into concordance Sites.

Only the values the evaluator needs are copied out of the pysam
record, so nothing keeps a reference into the open VariantFile.
"""

import pysam

from vareval.concordance.genotypes import Site


def site_from_pysam(record: pysam.VariantRecord) -> Site:
    """Return a Site with the genotypes, alts, qual and filters of record.

    A missing QUAL ('.') is stored as 0. A sample without a GT field
    is stored as a no-call.
    """
    genotypes = {}
    for name, sample in record.samples.items():
        genotypes[name] = tuple(sample.get("GT") or (None,))
    return Site(
        genotypes=genotypes,
        alts=tuple(record.alts or ()),
        qual=record.qual if record.qual is not None else 0.,
        filters=tuple(record.filter.keys()),
        contig=record.contig,
        pos=record.pos,
    )
