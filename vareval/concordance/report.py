#!/usr/bin/env python

"""Render the results of a GenotypeConcordance as tables or JSON.

The evaluator only stores counts. These functions read its derived
views and lay them out with the column names used in the reports:

samples:       sample, total_true_ref, n_ref/ref, %_ref/ref,
               n_ref/no-call, n_ref/het, n_ref/hom, ... (het, hom)
allele counts: alleleCount, n_found, n_missed, %_found
histograms:    one row per TP/FP, columns histBin0..histBinN
"""

from typing import List
from pathlib import Path
import pandas as pd
from loguru import logger

from vareval.concordance.genotypes import GenotypeType
from vareval.concordance.genotype_concordance import GenotypeConcordance
from vareval.concordance.sample_stats import REPORTED_TRUTH
from vareval.schema.report_schema import (
    SampleConcordance,
    AlleleCountFrequency,
    QualityHistograms,
    ConcordanceReport,
)

logger = logger.bind(name="vareval")

ABBREV = {
    GenotypeType.NO_CALL: "no-call",
    GenotypeType.HOM_REF: "ref",
    GenotypeType.HET: "het",
    GenotypeType.HOM_VAR: "hom",
}

FREQUENCY_HEADER = ["alleleCount", "n_found", "n_missed", "%_found"]


def sample_header() -> List[str]:
    """Column names of the samples table, in order."""
    header = ["sample"]
    for truth in REPORTED_TRUTH:
        tname = ABBREV[truth]
        header += [f"total_true_{tname}", f"n_{tname}/{tname}", f"%_{tname}/{tname}"]
        header += [f"n_{tname}/{ABBREV[called]}" for called in GenotypeType if called != truth]
    return header


def sample_table(gc: GenotypeConcordance) -> pd.DataFrame:
    """One row per sample with totals, agreement and discordant counts."""
    rows = []
    if gc.sample_stats is not None:
        for sample in gc.sample_stats:
            row = [sample]
            for truth in REPORTED_TRUTH:
                view = gc.sample_stats.row(sample, truth)
                row += [view.total, view.n_concordant, round(view.percent_concordant, 2)]
                row += list(view.discordant.values())
            rows.append(row)
    return pd.DataFrame(rows, columns=sample_header()).set_index("sample")


def frequency_table(gc: GenotypeConcordance) -> pd.DataFrame:
    """One row per true allele count with found and missed counts."""
    rows = [
        [count, stats.n_found, stats.n_missed, round(stats.percent_found, 2)]
        for count, stats in gc.allele_count_stats.items()
    ]
    return pd.DataFrame(rows, columns=FREQUENCY_HEADER).set_index("alleleCount")


def histogram_table(gc: GenotypeConcordance) -> pd.DataFrame:
    """TP and FP histogram rows. Requires finalize() to have been run."""
    hists = gc.quality_score_histograms
    return pd.DataFrame(
        [hists.true_positive_hist, hists.false_positive_hist],
        index=["true_positive_hist", "false_positive_hist"],
        columns=[f"histBin{i}" for i in range(hists.num_bins)],
    )


def build_report(gc: GenotypeConcordance) -> ConcordanceReport:
    """Collect all results into a serializable ConcordanceReport."""
    samples = {}
    if gc.sample_stats is not None:
        samples = {
            sample: SampleConcordance(name=sample, rows=gc.sample_stats.rows(sample))
            for sample in gc.sample_stats
        }
    hists = gc.quality_score_histograms
    return ConcordanceReport(
        params=gc.params,
        n_dropped_validation=gc.n_dropped_validation,
        samples=samples,
        allele_counts=[
            AlleleCountFrequency(
                allele_count=count,
                n_found=stats.n_found,
                n_missed=stats.n_missed,
                percent_found=stats.percent_found,
            )
            for count, stats in gc.allele_count_stats.items()
        ],
        histograms=QualityHistograms(
            max_quality=hists.max_quality,
            bin_size=hists.bin_size,
            true_positive=hists.true_positive_hist.tolist(),
            false_positive=hists.false_positive_hist.tolist(),
        ),
    )


def write_report(gc: GenotypeConcordance, prefix: Path) -> List[Path]:
    """Write the three CSV tables and the JSON report to prefix.*"""
    prefix = Path(prefix).expanduser().resolve()
    prefix.parent.mkdir(parents=True, exist_ok=True)
    outfiles = {
        "samples": prefix.with_name(prefix.name + ".samples.csv"),
        "allele_counts": prefix.with_name(prefix.name + ".allele_counts.csv"),
        "histograms": prefix.with_name(prefix.name + ".histograms.csv"),
        "json": prefix.with_name(prefix.name + ".json"),
    }
    sample_table(gc).to_csv(outfiles["samples"])
    frequency_table(gc).to_csv(outfiles["allele_counts"])
    histogram_table(gc).to_csv(outfiles["histograms"])
    with open(outfiles["json"], 'w', encoding="utf-8") as out:
        out.write(build_report(gc).model_dump_json(indent=2))
    for path in outfiles.values():
        logger.info(f"wrote {path}")
    return list(outfiles.values())
