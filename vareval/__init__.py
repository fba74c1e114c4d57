#!/usr/bin/env python

"""API level classes for vareval genotype concordance.

Examples
--------
>>> import vareval
>>> gc = vareval.GenotypeConcordance()
>>> for eval_site, truth_site in vareval.walk_site_pairs("eval.vcf", "truth.vcf"):
...     gc.process(eval_site, truth_site)
>>> gc.finalize()
>>> vareval.report.sample_table(gc)

>>> gc = vareval.run_concordance("eval.vcf", "truth.vcf")
>>> vareval.report.write_report(gc, "/tmp/NA12878")
"""

# bring nested functions to top for API access
from vareval.core.logger_setup import set_log_level
from vareval.core.exceptions import VarEvalError, SampleSetError
from vareval.schema.params_schema import ConcordanceParams
from vareval.concordance.genotypes import GenotypeType, Site
from vareval.concordance.genotype_concordance import GenotypeConcordance
from vareval.concordance import report
from vareval.vcf.site_walker import walk_site_pairs, run_concordance

__version__ = "0.1.0"
__author__ = "vareval developers"

# configure the logger
set_log_level("INFO")
