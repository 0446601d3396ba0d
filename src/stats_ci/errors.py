r"""
stats_ci.errors
===============
Exceptions raised by the confidence-interval engines.

Every recoverable failure derives from :class:`CIError`, which is itself a
:class:`ValueError`. Each subclass keeps the offending quantities as
attributes so callers can inspect them without parsing the message.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "CIError",
    "InvalidInputData",
    "TooFewSamples",
    "InvalidSuccesses",
    "InvalidConfidenceLevel",
    "TooFewSuccesses",
    "TooFewFailures",
    "FloatConversionError",
]


class CIError(ValueError):
    """Base class for all confidence-interval computation failures."""


class InvalidInputData(CIError):
    r"""
    A sample element was rejected by the validity predicate of the estimator.

    Attributes
    ----------
    value : Any
        The rejected element (NaN/infinite for the arithmetic mean,
        non-positive for the geometric and harmonic means).
    """

    def __init__(self, value: Any = None):
        self.value = value
        super().__init__(f"invalid input data: {value!r}")


class TooFewSamples(CIError):
    r"""
    Fewer observations than required to estimate a variance.

    Attributes
    ----------
    n : int
        Number of observations actually seen.
    """

    def __init__(self, n: int):
        self.n = n
        super().__init__(f"too few samples to compute a confidence interval: {n} (need at least 2)")


class InvalidSuccesses(CIError):
    """The number of successes is negative or exceeds the population."""

    def __init__(self, successes: int, population: int):
        self.successes = successes
        self.population = population
        super().__init__(f"invalid number of successes: {successes} (population is {population})")


class InvalidConfidenceLevel(CIError):
    """Confidence level outside the open interval (0, 1)."""

    def __init__(self, level: float):
        self.level = level
        super().__init__(f"confidence must be in (0,1), got {level!r}")


class TooFewSuccesses(CIError):
    r"""
    Not enough successes for the interval formula to be statistically valid.

    Attributes
    ----------
    successes : int
        Observed number of successes.
    population : int
        Sample size.
    value : float
        The quantity checked by the gate (``successes`` for the Wilson interval,
        :math:`n p` for the normal approximation).
    """

    def __init__(self, successes: int, population: int, value: float):
        self.successes = successes
        self.population = population
        self.value = value
        super().__init__(
            f"too few successes for statistical significance: {successes} out of {population} (gate value {value:g})"
        )


class TooFewFailures(CIError):
    r"""
    Not enough failures (non-successes) for the interval formula to be valid.

    Attributes
    ----------
    failures : int
        Observed number of failures.
    population : int
        Sample size.
    value : float
        The quantity checked by the gate (``failures`` for the Wilson interval,
        :math:`n q` for the normal approximation).
    """

    def __init__(self, failures: int, population: int, value: float):
        self.failures = failures
        self.population = population
        self.value = value
        super().__init__(
            f"too few failures for statistical significance: {failures} out of {population} (gate value {value:g})"
        )


class FloatConversionError(CIError):
    """A value could not be represented in the floating type used for the computation."""

    def __init__(self, context: str):
        self.context = context
        super().__init__(f"float conversion failed: {context}")
