#!/usr/bin/env python

"""Unittests for the GenotypeConcordance evaluator.

The evaluator is driven site by site with (eval, validation) pairs:
    - the sample tables are created on the first eval site.
    - validation sites seen earlier are buffered and replayed as missed.
    - the buffer is bounded and drops with a single warning when full.
    - an eval site with a sample not in the first eval site is fatal.

Tests
-----
1. Counts do not depend on the order of sites after the first eval site.
2. Buffered validation sites give the same counts as replaying them later.
3. Unknown samples raise SampleSetError and do not add a row, and
   recording stats before the first eval site raises VarEvalError.
4. The buffer keeps at most N sites and warns once.
5. Allele count found/missed table.
6. Per-sample concordance percentage.
7. TP/FP classification for single and multi sample eval sites.
8. Filtered and absent validation records.
"""

import random
import unittest
import numpy as np

from vareval.core.exceptions import SampleSetError, VarEvalError
from vareval.core.logger_setup import capture_logs
from vareval.schema.params_schema import ConcordanceParams
from vareval.concordance.genotypes import GenotypeType, Site
from vareval.concordance.genotype_concordance import GenotypeConcordance, EvaluatorState


def truth_sites(n: int, samples=("A", "B")):
    """Polymorphic validation-only sites, one het per sample."""
    return [
        Site(genotypes={s: (0, 1) for s in samples}, alts=("T",), qual=10., pos=i)
        for i in range(n)
    ]


class TestActivation(unittest.TestCase):

    def setUp(self):
        self.eval_ab = Site(genotypes={"A": (0, 1), "B": (0, 0)}, alts=("T",), qual=30.)
        self.truth_ab = truth_sites(2)

    def test_starts_uninitialized(self):
        gc = GenotypeConcordance()
        self.assertEqual(gc.state, EvaluatorState.UNINITIALIZED)
        self.assertIsNone(gc.sample_stats)
        gc.process(None, self.truth_ab[0])
        self.assertEqual(gc.state, EvaluatorState.UNINITIALIZED)
        self.assertIsNone(gc.sample_stats)

    def test_process_returns_none(self):
        gc = GenotypeConcordance()
        self.assertIsNone(gc.process(None, None))
        self.assertIsNone(gc.process(None, self.truth_ab[0]))
        self.assertIsNone(gc.process(self.eval_ab, self.truth_ab[1]))

    def test_buffered_replay_matches_later_replay(self):
        """Validation-only sites before or after the first eval are equal."""
        gc1 = GenotypeConcordance()
        for site in self.truth_ab:
            gc1.process(None, site)
        gc1.process(self.eval_ab, None)

        gc2 = GenotypeConcordance()
        gc2.process(self.eval_ab, None)
        for site in self.truth_ab:
            gc2.process(None, site)

        for sample in ("A", "B"):
            np.testing.assert_array_equal(
                gc1.sample_stats.get_counts(sample),
                gc2.sample_stats.get_counts(sample),
            )
            counts = gc1.sample_stats.get_counts(sample)
            self.assertEqual(counts[GenotypeType.HET, GenotypeType.NO_CALL], 2)
        self.assertEqual(gc1.allele_count_stats[2].n_missed, 2)
        self.assertEqual(gc2.allele_count_stats[2].n_missed, 2)
        self.assertEqual(gc1.state, EvaluatorState.ACTIVE)

    def test_eval_sample_set_is_fixed(self):
        gc = GenotypeConcordance()
        gc.process(self.eval_ab, None)
        eval_abc = Site(genotypes={"A": (0, 1), "B": (0, 1), "C": (1, 1)}, alts=("T",))
        with self.assertRaises(SampleSetError):
            gc.process(eval_abc, None)
        self.assertNotIn("C", gc.sample_stats)
        self.assertEqual(len(gc.sample_stats), 2)

    def test_update_stats_requires_active_state(self):
        gc = GenotypeConcordance()
        with self.assertRaises(VarEvalError):
            gc.update_stats(None, self.truth_ab[0])
        self.assertEqual(gc.state, EvaluatorState.UNINITIALIZED)
        self.assertEqual(gc.nsites, 0)
        gc.process(self.eval_ab, None)
        gc.update_stats(None, self.truth_ab[0])
        self.assertEqual(gc.nsites, 2)

    def test_validation_sample_not_in_eval_is_fatal_on_replay(self):
        gc = GenotypeConcordance()
        gc.process(None, truth_sites(1, samples=("A", "Z"))[0])
        with self.assertRaises(SampleSetError):
            gc.process(self.eval_ab, None)


class TestPendingBound(unittest.TestCase):

    def test_bound_enforced_with_single_warning(self):
        bound = 4
        gc = GenotypeConcordance(ConcordanceParams(max_missed_validation_data=bound))
        with capture_logs("WARNING") as cap:
            for site in truth_sites(bound + 5):
                gc.process(None, site)
        warnings = [i for i in cap if i.startswith("WARNING")]
        self.assertEqual(len(warnings), 1)
        self.assertEqual(gc.n_dropped_validation, 5)

        gc.process(Site(genotypes={"A": (0, 0), "B": (0, 0)}), None)
        counts = gc.sample_stats.get_counts("A")
        self.assertEqual(counts[GenotypeType.HET, GenotypeType.NO_CALL], bound)
        self.assertEqual(gc.allele_count_stats[2].n_missed, bound)

    def test_zero_bound_drops_everything(self):
        gc = GenotypeConcordance(ConcordanceParams(max_missed_validation_data=0))
        for site in truth_sites(3):
            gc.process(None, site)
        gc.process(Site(genotypes={"A": (0, 0), "B": (0, 0)}), None)
        self.assertEqual(gc.n_dropped_validation, 3)
        self.assertEqual(len(gc.allele_count_stats), 0)


class TestOrderIndependence(unittest.TestCase):

    def test_permuted_sites_give_same_counts(self):
        rng = random.Random(123)
        first = Site(genotypes={"A": (0, 0), "B": (0, 1)}, alts=("G",), qual=5.)
        pairs = []
        for pos in range(60):
            gts = [(0, 0), (0, 1), (1, 1), (None, None)]
            eval_site = Site(
                genotypes={"A": rng.choice(gts), "B": rng.choice(gts)},
                alts=("T",), qual=float(pos), pos=pos,
            )
            truth_site = Site(
                genotypes={"A": rng.choice(gts), "B": rng.choice(gts)},
                alts=("T",), pos=pos,
            )
            pairs.append(rng.choice([
                (eval_site, truth_site), (eval_site, None), (None, truth_site),
            ]))

        results = []
        for _ in range(3):
            rng.shuffle(pairs)
            gc = GenotypeConcordance()
            gc.process(first, None)
            for eval_site, truth_site in pairs:
                gc.process(eval_site, truth_site)
            gc.finalize()
            results.append(gc)

        for gc in results[1:]:
            for sample in ("A", "B"):
                np.testing.assert_array_equal(
                    gc.sample_stats.get_counts(sample),
                    results[0].sample_stats.get_counts(sample),
                )
            self.assertEqual(
                list(gc.allele_count_stats.items()),
                list(results[0].allele_count_stats.items()),
            )
            np.testing.assert_array_equal(
                gc.quality_score_histograms.true_positive_hist,
                results[0].quality_score_histograms.true_positive_hist,
            )


class TestStatistics(unittest.TestCase):

    def test_allele_count_found_and_missed(self):
        gc = GenotypeConcordance()
        eval_site = Site(genotypes={"A": (0, 1), "B": (0, 1)}, alts=("T",), qual=20.)
        ac2 = Site(genotypes={"A": (0, 1), "B": (0, 1)}, alts=("T",))
        ac1 = Site(genotypes={"A": (0, 1), "B": (0, 0)}, alts=("T",))
        gc.process(eval_site, ac2)
        gc.process(None, ac2)
        gc.process(eval_site, ac1)

        table = dict(gc.allele_count_stats.items())
        self.assertEqual(sorted(table), [1, 2])
        self.assertEqual((table[1].n_found, table[1].n_missed), (1, 0))
        self.assertEqual((table[2].n_found, table[2].n_missed), (1, 1))
        self.assertEqual(table[2].percent_found, 50.0)

    def test_multiallelic_allele_count_sums_alts(self):
        gc = GenotypeConcordance()
        truth = Site(genotypes={"A": (1, 2), "B": (2, 2)}, alts=("T", "G"))
        gc.process(Site(genotypes={"A": (0, 1), "B": (0, 0)}, alts=("T",)), truth)
        self.assertEqual(gc.allele_count_stats[4].n_found, 1)

    def test_percent_concordance(self):
        gc = GenotypeConcordance()
        truth = Site(genotypes={"A": (0, 0)}, alts=("T",))
        for _ in range(8):
            gc.process(Site(genotypes={"A": (0, 0)}, alts=("T",)), truth)
        for _ in range(2):
            gc.process(Site(genotypes={"A": (0, 1)}, alts=("T",)), truth)
        row = gc.sample_stats.row("A", GenotypeType.HOM_REF)
        self.assertEqual(row.total, 10)
        self.assertEqual(row.n_concordant, 8)
        self.assertEqual(row.percent_concordant, 80.0)
        self.assertEqual(row.discordant, {"NO_CALL": 0, "HET": 2, "HOM_VAR": 0})

    def test_single_sample_true_and_false_positives(self):
        gc = GenotypeConcordance()
        eval_site = Site(genotypes={"A": (0, 1)}, alts=("T",), qual=30.)
        gc.process(eval_site, Site(genotypes={"A": (0, 1)}, alts=("T",)))
        gc.process(eval_site, Site(genotypes={"A": (0, 0)}, alts=("T",)))
        # validation without the sample does not enter the histograms
        gc.process(eval_site, Site(genotypes={"B": (1, 1)}, alts=("T",)))
        hists = gc.quality_score_histograms
        self.assertEqual(hists.true_positive_qualities, [30.])
        self.assertEqual(hists.false_positive_qualities, [30.])

    def test_multi_sample_uses_site_polymorphism(self):
        gc = GenotypeConcordance()
        eval_site = Site(genotypes={"A": (0, 1), "B": (0, 0)}, alts=("T",), qual=12.)
        poly = Site(genotypes={"A": (0, 0), "B": (0, 1)}, alts=("T",))
        mono = Site(genotypes={"A": (0, 0), "B": (0, 0)}, alts=("T",))
        gc.process(eval_site, poly)
        gc.process(eval_site, mono)
        hists = gc.quality_score_histograms
        self.assertEqual(hists.true_positive_qualities, [12.])
        self.assertEqual(hists.false_positive_qualities, [12.])

    def test_monomorphic_eval_not_in_histograms(self):
        gc = GenotypeConcordance()
        eval_site = Site(genotypes={"A": (0, 0)}, alts=("T",), qual=12.)
        gc.process(eval_site, Site(genotypes={"A": (0, 1)}, alts=("T",)))
        self.assertEqual(gc.quality_score_histograms.true_positive_qualities, [])
        self.assertEqual(gc.quality_score_histograms.false_positive_qualities, [])

    def test_filtered_validation_is_treated_as_absent(self):
        gc = GenotypeConcordance()
        filtered = Site(genotypes={"A": (1, 1)}, alts=("T",), filters=("LowQual",))

        # no eval and filtered truth is a no-op, not buffered
        gc.process(None, filtered)
        self.assertEqual(gc.state, EvaluatorState.UNINITIALIZED)

        gc.process(Site(genotypes={"A": (0, 1)}, alts=("T",), qual=40.), filtered)
        counts = gc.sample_stats.get_counts("A")
        self.assertEqual(counts[GenotypeType.NO_CALL, GenotypeType.HET], 1)
        self.assertEqual(counts.sum(), 1)
        self.assertEqual(len(gc.allele_count_stats), 0)
        self.assertEqual(gc.quality_score_histograms.true_positive_qualities, [])

    def test_pass_filter_is_valid(self):
        gc = GenotypeConcordance()
        passed = Site(genotypes={"A": (1, 1)}, alts=("T",), filters=("PASS",))
        gc.process(Site(genotypes={"A": (1, 1)}, alts=("T",)), passed)
        counts = gc.sample_stats.get_counts("A")
        self.assertEqual(counts[GenotypeType.HOM_VAR, GenotypeType.HOM_VAR], 1)

    def test_finalize_without_eval_sites(self):
        gc = GenotypeConcordance()
        gc.process(None, truth_sites(1)[0])
        gc.finalize()
        self.assertIsNone(gc.sample_stats)
        self.assertEqual(gc.quality_score_histograms.true_positive_hist.sum(), 0)


if __name__ == "__main__":
    unittest.main()
