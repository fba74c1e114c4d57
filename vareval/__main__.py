#!/usr/bin/env python

"""Command line interface.

Examples
--------
>>> vareval concordance -e EVAL.vcf.gz -t TRUTH.vcf.gz -o ./results/NA12878
>>> vareval concordance -e EVAL.vcf -t TRUTH.vcf -o out --bins 40 --logger DEBUG
"""

from typing import List, Optional
import argparse
from pathlib import Path
from loguru import logger
from pydantic import ValidationError

import vareval
from vareval.core.exceptions import VarEvalError
from vareval.schema.params_schema import ConcordanceParams
from vareval.vcf.site_walker import run_concordance
from vareval.concordance.report import write_report

logger = logger.bind(name="vareval")

VERSION = str(vareval.__version__)
HEADER = f"""
-------------------------------------------------------------
 vareval [v.{VERSION}]
 Genotype concordance of an eval call set against truth
-------------------------------------------------------------\
"""

DESCRIPTION = " vareval command line tool. Select a positional subcommand:"

CONCORDANCE_EPILOG = """\
Examples
--------
>>> vareval concordance -e EVAL.vcf.gz -t TRUTH.vcf.gz -o ./results/NA12878
>>> vareval concordance -e EVAL.vcf -t TRUTH.vcf -o out --max-missed 50000
>>> vareval concordance -e EVAL.vcf -t TRUTH.vcf -o out --logger DEBUG --log-file log.txt

Outputs
-------
{prefix}.samples.csv        per-sample truth vs called genotype counts
{prefix}.allele_counts.csv  truth sites found/missed by allele count
{prefix}.histograms.csv     quality histograms of TP and FP calls
{prefix}.json               all of the above as JSON
"""


def setup_concordance_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Add `vareval concordance` subcommand parser."""
    conc = subparsers.add_parser(
        "concordance",
        description=HEADER + "\n" + " vareval concordance: compare eval genotypes to truth",
        help="Compare the genotypes of an eval VCF to a truth VCF.",
        epilog=CONCORDANCE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    conc.add_argument(
        "-e", metavar="eval", type=Path, required=True,
        help="Path to the coordinate sorted VCF/BCF file being evaluated.",
    )
    conc.add_argument(
        "-t", metavar="truth", type=Path, required=True,
        help="Path to the coordinate sorted VCF/BCF file used as truth.",
    )
    conc.add_argument(
        "-o", metavar="outprefix", type=Path, required=True,
        help="Prefix of the output files, e.g., './results/NA12878'.",
    )
    conc.add_argument(
        "--max-missed", type=int,
        help=(
            "Max number of truth sites held before the first eval site is "
            "seen. Later ones are dropped with a warning. Default=10000.")
    )
    conc.add_argument(
        "--bins", type=int,
        help="Number of bins in the quality score histograms. Default=20.",
    )
    conc.add_argument(
        "--logger", type=str, nargs="*", default=("INFO", None),
        help=(
            "Logging info entered as one value for LOGLEVEL, or two values "
            "for LOGLEVEL LOGFILE; e.g., 'DEBUG' or 'DEBUG vareval.txt'.")
    )
    conc.add_argument(
        "--log-file", type=Path,
        help="Write log messages to this file instead of stderr.",
    )


def setup_parsers() -> argparse.ArgumentParser:
    """Setup and return an ArgumentParser w/ subcommands."""
    parser = argparse.ArgumentParser(
        prog="vareval",
        description=HEADER + "\n" + DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--version", action='version', version=f"vareval {VERSION}")
    subparsers = parser.add_subparsers(help="sub-commands", dest="subcommand")
    setup_concordance_subparser(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse user CLI args and perform actions."""
    parser = setup_parsers()
    args = parser.parse_args(argv)

    # set logging ---------------------------------------------------
    if hasattr(args, "logger") and args.logger:
        log_file = getattr(args, "log_file", None)
        if log_file is None and len(args.logger) > 1:
            log_file = args.logger[1]
        if log_file:
            vareval.set_log_level(args.logger[0], str(log_file))
        else:
            vareval.set_log_level(args.logger[0])

    if args.subcommand != "concordance":
        parser.print_help()
        return 1

    # concordance job -----------------------------------------------
    kwargs = {}
    if args.max_missed is not None:
        kwargs["max_missed_validation_data"] = args.max_missed
    if args.bins is not None:
        kwargs["num_bins"] = args.bins
    try:
        params = ConcordanceParams(**kwargs)
    except ValidationError as inst:
        logger.error(f"invalid arguments:\n{inst}")
        return 1

    for path in (args.e, args.t):
        if not path.exists():
            logger.error(f"No VCF file found at {path}")
            return 1

    try:
        gc = run_concordance(args.e, args.t, params)
        write_report(gc, args.o)
    except VarEvalError as inst:
        logger.error(f"vareval concordance failed: {inst}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
