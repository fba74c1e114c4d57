#!/usr/bin/env python

"""Params schema for type checking and serialization.

Pydantic Models are similar to dataclases but they also include
*type validation*, meaning that if you try to set an attribute to
the wrong type it will raise an error. The CLI flags of
`vareval concordance` map one-to-one onto these fields.
"""

# pylint: disable=no-self-argument, no-name-in-module

from pydantic import BaseModel, Field


class ConcordanceParams(BaseModel):
    """Options for the GenotypeConcordance evaluator."""
    max_missed_validation_data: int = Field(
        10_000, ge=0,
        help="max validation sites held before the first eval site appears",
    )
    num_bins: int = Field(
        20, ge=2,
        help="number of bins in the TP/FP quality score histograms",
    )

    class Config:
        """Enables type checking validation when using setattr in API."""
        validate_assignment = True

    def __str__(self):
        return self.model_dump_json(indent=2)
