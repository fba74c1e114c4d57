#!/usr/bin/env python

"""Read eval and truth VCF files as paired sites using pysam."""

from vareval.vcf.pysam_site import site_from_pysam
from vareval.vcf.site_walker import ContigOrder, walk_site_pairs, run_concordance
