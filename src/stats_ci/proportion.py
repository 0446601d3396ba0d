r"""
stats_ci.proportion
===================
Confidence intervals for a binomial proportion.

Two formulas are provided, both two-sided:

- :func:`ci_wilson` (the default used by :func:`ci`), the Wilson score
  interval, which stays usable at small sample sizes and extreme proportions;
- :func:`ci_z_normal`, the textbook normal approximation
  :math:`\hat p \pm z\sqrt{\hat p \hat q / n}`, gated by the usual
  :math:`n\hat p \ge 10` and :math:`n\hat q \ge 10` rule of thumb.

Neither formula clamps its bounds to :math:`[0, 1]`.

Examples
--------
>>> data = [True, False, True, True, False, True, True, False, True, True,
...         False, False, False, True, False, True, False, False, True, False]
>>> ci = ci_true(0.95, data)
>>> round(ci.low, 3), round(ci.high, 3)
(0.299, 0.701)

References
----------
* https://en.wikipedia.org/wiki/Binomial_proportion_confidence_interval
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from .confidence import Confidence, ensure_confidence
from .errors import InvalidConfidenceLevel, InvalidSuccesses, TooFewFailures, TooFewSuccesses
from .interval import Interval
from .utils import z_crit

# Local logger per engine module
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


_WILSON_MIN_COUNT = 2  # successes and failures
_NORMAL_MIN_EXPECTED = 10.0  # n*p and n*q


class ProportionMethod(str, Enum):
    r"""
    Proportion interval formulas.

    Attributes
    ----------
    wilson : str
        Wilson score interval (default).
    normal : str
        Normal (Wald) approximation.
    """

    wilson = "wilson"
    normal = "normal"


def _level(confidence: Any) -> float:
    # proportion intervals are always two-sided; only the level is used
    if isinstance(confidence, (Confidence, Mapping)):
        return ensure_confidence(confidence).level
    return confidence


def _validate(confidence: float, population: int, successes: int) -> None:
    if successes < 0 or successes > population:
        raise InvalidSuccesses(successes, population)
    if not (0.0 < confidence < 1.0):
        raise InvalidConfidenceLevel(confidence)


def ci_wilson(confidence: Confidence | float, population: int, successes: int) -> Interval[float]:
    r"""
    Wilson score interval for the proportion of successes.

    With :math:`n` trials, :math:`s` successes, :math:`f = n - s` failures and
    :math:`z` the two-sided normal critical value,

    .. math::
       \frac{s + z^2/2}{n + z^2} \;\pm\; \frac{z}{n + z^2}\sqrt{\frac{s f}{n} + \frac{z^2}{4}}.

    Parameters
    ----------
    confidence : float or Confidence
        Confidence level in :math:`(0, 1)`. The sidedness of a
        :class:`~stats_ci.confidence.Confidence` is ignored.
    population : int
        Number of trials.
    successes : int
        Number of successes.

    Returns
    -------
    Interval of float
        Not clamped to :math:`[0, 1]`.

    Raises
    ------
    InvalidSuccesses
        If ``successes`` is negative or larger than ``population``.
    InvalidConfidenceLevel
        If ``confidence`` is outside :math:`(0, 1)`.
    TooFewSuccesses
        If fewer than 2 successes were observed.
    TooFewFailures
        If fewer than 2 failures were observed.

    Examples
    --------
    >>> ci = ci_wilson(0.95, 500, 421)
    >>> round(ci.low, 2), round(ci.high, 2)
    (0.81, 0.87)
    """
    confidence = _level(confidence)
    _validate(confidence, population, successes)

    n = float(population)
    n_s = float(successes)
    failures = population - successes
    n_f = float(failures)

    if successes < _WILSON_MIN_COUNT:
        logger.debug(f"Wilson CI rejected: {successes} successes out of {population}")
        raise TooFewSuccesses(successes, population, n_s)
    if failures < _WILSON_MIN_COUNT:
        logger.debug(f"Wilson CI rejected: {failures} failures out of {population}")
        raise TooFewFailures(failures, population, n_f)

    z = z_crit(confidence, True)
    z2 = z * z

    center = (n_s + z2 / 2.0) / (n + z2)
    span = (z / (n + z2)) * math.sqrt(n_s * n_f / n + z2 / 4.0)
    return Interval(center - span, center + span)


def ci_z_normal(confidence: Confidence | float, population: int, successes: int) -> Interval[float]:
    r"""
    Normal-approximation interval :math:`\hat p \pm z\sqrt{\hat p \hat q / n}`.

    Parameters
    ----------
    confidence : float or Confidence
        Confidence level in :math:`(0, 1)`. The sidedness of a
        :class:`~stats_ci.confidence.Confidence` is ignored.
    population : int
        Number of trials.
    successes : int
        Number of successes.

    Returns
    -------
    Interval of float
        Not clamped to :math:`[0, 1]`.

    Raises
    ------
    InvalidSuccesses, InvalidConfidenceLevel
        As for :func:`ci_wilson`.
    TooFewSuccesses
        If :math:`n\hat p < 10`.
    TooFewFailures
        If :math:`n\hat q < 10`.
    """
    confidence = _level(confidence)
    _validate(confidence, population, successes)

    n = float(population)
    p = successes / n if population else 0.0
    q = 1.0 - p

    if n * p < _NORMAL_MIN_EXPECTED:
        logger.debug(f"Normal-approximation CI rejected: n*p = {n * p:g}")
        raise TooFewSuccesses(successes, population, n * p)
    if n * q < _NORMAL_MIN_EXPECTED:
        logger.debug(f"Normal-approximation CI rejected: n*q = {n * q:g}")
        raise TooFewFailures(population - successes, population, n * q)

    std_err = math.sqrt(p * q / n)
    z = z_crit(confidence, True)
    return Interval(p - z * std_err, p + z * std_err)


_METHODS: dict[ProportionMethod, Callable[[float, int, int], Interval[float]]] = {
    ProportionMethod.wilson: ci_wilson,
    ProportionMethod.normal: ci_z_normal,
}


def ci(
    confidence: Confidence | float,
    population: int,
    successes: int,
    method: ProportionMethod | str = ProportionMethod.wilson,
) -> Interval[float]:
    r"""
    Two-sided confidence interval for the proportion of successes.

    Parameters
    ----------
    confidence : float or Confidence
        Confidence level in :math:`(0, 1)`. The sidedness of a
        :class:`~stats_ci.confidence.Confidence` is ignored.
    population : int
        Number of trials.
    successes : int
        Number of successes.
    method : {"wilson", "normal"}, default "wilson"
        Interval formula.

    Returns
    -------
    Interval of float

    See Also
    --------
    ci_wilson, ci_z_normal
    """
    try:
        fn = _METHODS[ProportionMethod(method)]
    except ValueError:
        raise ValueError(f"method must be one of 'wilson', 'normal', got {method!r}") from None
    return fn(confidence, population, successes)


def ci_true(
    confidence: Confidence | float,
    data: Iterable[Any],
    method: ProportionMethod | str = ProportionMethod.wilson,
) -> Interval[float]:
    """Confidence interval for the proportion of truthy elements in ``data``."""
    population = 0
    successes = 0
    for x in data:
        population += 1
        if x:
            successes += 1
    return ci(confidence, population, successes, method)


def ci_by_predicate(
    confidence: Confidence | float,
    data: Iterable[Any],
    predicate: Callable[[Any], bool],
    method: ProportionMethod | str = ProportionMethod.wilson,
) -> Interval[float]:
    """
    Confidence interval for the proportion of elements satisfying ``predicate``.

    Examples
    --------
    >>> ci = ci_by_predicate(0.95, range(1, 21), lambda x: x <= 10)
    >>> round(ci.low, 3), round(ci.high, 3)
    (0.299, 0.701)
    """
    return ci_true(confidence, map(predicate, data), method)


__all__ = [
    "ProportionMethod",
    "ci",
    "ci_wilson",
    "ci_z_normal",
    "ci_true",
    "ci_by_predicate",
]
