"""IRT (Item Response Theory) math - binary 3PL, graded response and partial credit models."""

from cat_engine.irt.information import (
    fisher_information,
    fisher_test_information,
    kl_divergence,
    observed_information,
)
# the likelihood function stays under its submodule so cat_engine.irt.likelihood is the module
from cat_engine.irt.likelihood import d1_log_likelihood, d2_log_likelihood, log_likelihood
from cat_engine.irt.prob import (
    category_probabilities,
    gpcm_derivatives,
    gpcm_first_derivative,
    prob_gpcm,
    prob_grm,
    prob_ltm,
    probability,
)

__all__ = [
    "prob_ltm",
    "prob_grm",
    "prob_gpcm",
    "gpcm_first_derivative",
    "gpcm_derivatives",
    "probability",
    "category_probabilities",
    "log_likelihood",
    "d1_log_likelihood",
    "d2_log_likelihood",
    "observed_information",
    "fisher_information",
    "fisher_test_information",
    "kl_divergence",
]
