#!/usr/bin/env python

"""Exceptions raised by vareval.

Every failure that a user can cause (unsorted input, mismatched
contig headers, reading histograms before they are binned, recording
an unknown sample) is a VarEvalError, which the CLI reports and turns
into a non-zero exit code.
"""


class VarEvalError(Exception):
    """Concordance evaluation cannot continue with the given input or state."""


class SampleSetError(VarEvalError):
    """A sample was recorded that is not in the fixed sample set.

    The concordance tables are sized from the first evaluation record,
    so every later record must carry the same samples.
    """
