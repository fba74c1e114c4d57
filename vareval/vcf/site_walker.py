#!/usr/bin/env python

"""Forward-only walk over two coordinate-sorted VCF files.

This is a minimal traversal engine for GenotypeConcordance: each file
is read once, front to back, without an index, and records at the same
(contig, pos) are paired. A position present in only one file is
paired with None.

Sorting is checked per file against that file's own contig order: the
contigs of its header, followed by undeclared contigs in the order
they first appear in the file. When the two files sit on different
contigs the one to advance is chosen by, in turn:
1. a contig the other file has already left comes first.
2. the order of a header that declares both contigs.
3. natural (karyotypic) order of the contig names, e.g. 1, 2, 10, X.

Headers that declare shared contigs in different orders cannot be
walked together and raise VarEvalError before any site is read.
"""

from typing import Dict, Iterator, Iterable, Optional, Tuple, Set
from pathlib import Path
import pysam
from loguru import logger

from vareval.core.exceptions import VarEvalError
from vareval.concordance.genotypes import Site
from vareval.concordance.genotype_concordance import GenotypeConcordance
from vareval.schema.params_schema import ConcordanceParams
from vareval.vcf.pysam_site import site_from_pysam

logger = logger.bind(name="vareval")

SiteKey = Tuple[int, int]
SEX_AND_MITO = {"X": 23, "Y": 24, "M": 25, "MT": 25}


class ContigOrder:
    """Assign increasing indices to contig names."""
    def __init__(self, contigs: Iterable[str] = ()):
        self._index: Dict[str, int] = {}
        for contig in contigs:
            self.add(contig)

    def __contains__(self, contig: str) -> bool:
        return contig in self._index

    def add(self, contig: str) -> int:
        if contig not in self._index:
            self._index[contig] = len(self._index)
        return self._index[contig]

    def index(self, contig: str) -> int:
        return self._index[contig]

    def key(self, site: Site) -> SiteKey:
        return (self.add(site.contig), site.pos)


def natural_key(contig: str) -> Tuple[int, int, str]:
    """Sort key placing chr1..chr22 numerically, then X, Y, M, then others.

    >>> sorted(["10", "X", "2", "chrM", "GL000192.1"], key=natural_key)
    ['2', '10', 'X', 'chrM', 'GL000192.1']
    """
    name = contig[3:] if contig.lower().startswith("chr") else contig
    if name.isdigit():
        return (0, int(name), "")
    if name.upper() in SEX_AND_MITO:
        return (0, SEX_AND_MITO[name.upper()], "")
    return (1, 0, name)


def check_header_orders(eval_contigs: Iterable[str], truth_contigs: Iterable[str]) -> None:
    """Raise VarEvalError if shared contigs are declared in different orders."""
    eval_contigs = list(eval_contigs)
    truth_contigs = list(truth_contigs)
    shared = set(eval_contigs) & set(truth_contigs)
    eorder = [i for i in eval_contigs if i in shared]
    torder = [i for i in truth_contigs if i in shared]
    if eorder != torder:
        msg = (
            "eval and truth VCF headers declare contigs in different orders; "
            "both files must be sorted the same way. "
            f"eval: {eorder[:10]} truth: {torder[:10]}")
        logger.error(msg)
        raise VarEvalError(msg)


class SiteStream:
    """One VCF read as Sites, checking its own sort order.

    `site` is the current (not yet consumed) Site, or None at the end.
    """
    def __init__(self, vcf: pysam.VariantFile, label: str):
        self.label = label
        self.declared = ContigOrder(list(vcf.header.contigs))
        self.order = ContigOrder(list(vcf.header.contigs))
        self.finished: Set[str] = set()
        self.site: Optional[Site] = None
        self._records = iter(vcf)
        self._key: Optional[SiteKey] = None
        self._load()

    def _load(self) -> None:
        prev = self.site
        record = next(self._records, None)
        self.site = None if record is None else site_from_pysam(record)
        if self.site is not None:
            key = self.order.key(self.site)
            if self._key is not None and key < self._key:
                msg = (
                    f"{self.label} VCF is not sorted: "
                    f"{self.site.contig}:{self.site.pos} follows "
                    f"{prev.contig}:{prev.pos}")
                logger.error(msg)
                raise VarEvalError(msg)
            self._key = key
        if prev is not None and (self.site is None or self.site.contig != prev.contig):
            self.finished.add(prev.contig)

    def advance(self) -> Site:
        """Consume and return the current site."""
        site = self.site
        self._load()
        return site


def _eval_contig_first(estream: SiteStream, tstream: SiteStream) -> bool:
    """Whether the eval stream's contig precedes the truth stream's."""
    econtig = estream.site.contig
    tcontig = tstream.site.contig
    if econtig in tstream.finished:
        return True
    if tcontig in estream.finished:
        return False
    for declared in (estream.declared, tstream.declared):
        if econtig in declared and tcontig in declared:
            return declared.index(econtig) < declared.index(tcontig)
    return natural_key(econtig) < natural_key(tcontig)


def walk_site_pairs(
    eval_vcf: Path,
    truth_vcf: Path,
) -> Iterator[Tuple[Optional[Site], Optional[Site]]]:
    """Yield (eval_site, truth_site) pairs in genomic order."""
    with pysam.VariantFile(str(eval_vcf)) as evcf, pysam.VariantFile(str(truth_vcf)) as tvcf:
        check_header_orders(evcf.header.contigs, tvcf.header.contigs)
        estream = SiteStream(evcf, "eval")
        tstream = SiteStream(tvcf, "truth")
        while estream.site is not None or tstream.site is not None:
            if tstream.site is None:
                yield estream.advance(), None
            elif estream.site is None:
                yield None, tstream.advance()
            elif estream.site.contig == tstream.site.contig:
                if estream.site.pos < tstream.site.pos:
                    yield estream.advance(), None
                elif tstream.site.pos < estream.site.pos:
                    yield None, tstream.advance()
                else:
                    yield estream.advance(), tstream.advance()
            elif _eval_contig_first(estream, tstream):
                yield estream.advance(), None
            else:
                yield None, tstream.advance()


def run_concordance(
    eval_vcf: Path,
    truth_vcf: Path,
    params: Optional[ConcordanceParams] = None,
    report_every: int = 100_000,
) -> GenotypeConcordance:
    """Evaluate every site pair of two VCFs and finalize the results."""
    gc = GenotypeConcordance(params)
    logger.info(f"eval: {eval_vcf}")
    logger.info(f"truth: {truth_vcf}")
    npairs = 0
    for eval_site, truth_site in walk_site_pairs(eval_vcf, truth_vcf):
        gc.process(eval_site, truth_site)
        npairs += 1
        if report_every and not npairs % report_every:
            logger.info(f"processed {npairs} positions")
    gc.finalize()
    return gc
