r"""
stats_ci.mean
=============
Confidence intervals for the arithmetic, geometric and harmonic mean.

The three estimators are one algorithm, :func:`ci_with_transforms`, closed over
three small functions bundled in a :class:`MeanTransform`:

- ``is_valid`` rejects elements outside the estimator's domain;
- ``transform`` maps an element into the space where the mean is arithmetic
  (identity, :math:`\log x`, :math:`1/x`);
- ``inverse`` maps the two bounds back.

With :math:`y_i` the transformed sample, :math:`\bar y` its mean and :math:`s`
its Bessel-corrected standard deviation, the interval in transform space is

.. math::
   \bar y \pm t_{1-\alpha',\,n-1}\,\frac{s}{\sqrt{n}}.

Student-:math:`t` is used regardless of sample size: small samples get a
wider interval and large ones converge to the normal interval.

Examples
--------
>>> ci = arithmetic_ci(0.95, [1.0, 2.0, 3.0, 4.0])
>>> round(ci.low, 3), round(ci.high, 3)
(0.446, 4.554)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

import numpy as np

from .confidence import ensure_confidence
from .errors import FloatConversionError, InvalidInputData, TooFewSamples
from .interval import Interval
from .utils import kahan_add, t_value

# Local logger per engine module
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


class MeanKind(str, Enum):
    r"""
    Supported flavours of mean.

    Attributes
    ----------
    arithmetic : str
        :math:`\frac{1}{n}\sum_i x_i`.
    geometric : str
        :math:`\exp\left(\frac{1}{n}\sum_i \log x_i\right)`.
    harmonic : str
        :math:`n / \sum_i x_i^{-1}`.
    """

    arithmetic = "arithmetic"
    geometric = "geometric"
    harmonic = "harmonic"


def _as_floating(x: Any) -> np.floating:
    # numpy floating scalars keep their precision; everything else is float64
    if isinstance(x, np.floating):
        return x
    return np.float64(x)


def _to_dtype(value: float, like: np.floating, what: str) -> np.floating:
    dtype = type(like)
    try:
        with np.errstate(over="raise", invalid="raise"):
            converted = dtype(value)
    except (FloatingPointError, OverflowError, TypeError, ValueError) as e:
        raise FloatConversionError(f"converting {what} into type {dtype.__name__}: {e}") from e
    if not np.isfinite(converted):
        raise FloatConversionError(f"converting {what} into type {dtype.__name__}")
    return converted


def ci_with_transforms(
    confidence: Any,
    data: Iterable[Any],
    is_valid: Callable[[Any], bool],
    transform: Callable[[np.floating], np.floating],
    inverse: Callable[[np.floating, np.floating], tuple[Any, Any]],
) -> Interval:
    r"""
    Confidence interval of a mean after applying a transform to the sample.

    The sample is consumed once, lazily. Sums of the transformed values and of
    their squares are accumulated with Kahan summation, so the variance is
    obtained without a second pass.

    Parameters
    ----------
    confidence : Confidence or float
        Confidence specification (a bare float is two-sided).
    data : iterable
        Sample values. Numpy floating scalars keep their dtype for the whole
        computation; other numbers are computed in ``float64``.
    is_valid : callable
        Predicate on a raw element; the first rejected element aborts.
    transform : callable
        Map from an element into the computation space.
    inverse : callable
        Map ``(low, high)`` in computation space back to the original domain.
        It may reverse the bound order, and may return ``None`` for a bound
        that does not exist in the original domain.

    Returns
    -------
    Interval
        Ordered interval in the original domain, one-sided when ``inverse``
        drops a bound.

    Raises
    ------
    InvalidInputData
        If an element fails ``is_valid``.
    TooFewSamples
        If fewer than 2 elements are supplied.
    FloatConversionError
        If the critical value or the sample size cannot be represented in the
        computation type.
    """
    confidence = ensure_confidence(confidence)

    total = comp = None
    total_sq = comp_sq = None
    population = 0

    for x in data:
        if not is_valid(x):
            logger.debug(f"Rejected sample element {x!r} at position {population}")
            raise InvalidInputData(x)
        y = transform(_as_floating(x))
        if total is None:
            zero = type(y)(0)
            total, comp, total_sq, comp_sq = zero, zero, zero, zero
        total, comp = kahan_add(total, y, comp)
        total_sq, comp_sq = kahan_add(total_sq, y * y, comp_sq)
        population += 1

    if population < 2:
        logger.debug(f"Mean CI needs at least 2 samples, got {population}")
        raise TooFewSamples(population)

    crit = _to_dtype(t_value(confidence, population - 1), total, "t-value")
    n = _to_dtype(population, total, f"population ({population})")

    mean = total / n
    variance = (total_sq - total * total / n) / (n - 1)
    # rounding can push a zero variance slightly negative
    std_dev = np.sqrt(max(variance, type(variance)(0)))
    margin = crit * std_dev / np.sqrt(n)

    low, high = inverse(mean - margin, mean + margin)
    if isinstance(total, np.float64):
        low = None if low is None else float(low)
        high = None if high is None else float(high)
    if high is None:
        return Interval.lower_bounded(low)
    if low is None:
        return Interval.upper_bounded(high)
    return Interval.from_pair(low, high)


def _is_finite(x: Any) -> bool:
    try:
        return math.isfinite(x)
    except (TypeError, OverflowError):
        return False


def _is_positive(x: Any) -> bool:
    return _is_finite(x) and x > 0


@dataclass(frozen=True)
class MeanTransform:
    r"""
    The three functions that specialise :func:`ci_with_transforms` to one kind of mean.

    Parameters
    ----------
    name : str
        Mean kind this transform implements.
    is_valid : callable
        Domain predicate on raw elements.
    transform : callable
        Forward map into the computation space.
    inverse : callable
        Map of ``(low, high)`` back to the original domain.

    Examples
    --------
    >>> ci = GEOMETRIC.ci(0.95, [1.0, 10.0, 100.0])
    >>> ci.low < 10.0 < ci.high
    True
    """

    name: str
    is_valid: Callable[[Any], bool]
    transform: Callable[[np.floating], np.floating]
    inverse: Callable[[np.floating, np.floating], tuple[Any, Any]]

    def ci(self, confidence: Any, data: Iterable[Any]) -> Interval:
        """Confidence interval of this kind of mean over ``data``."""
        return ci_with_transforms(confidence, data, self.is_valid, self.transform, self.inverse)


ARITHMETIC = MeanTransform(
    MeanKind.arithmetic.value,
    _is_finite,
    lambda x: x,
    lambda lo, hi: (lo, hi),
)

GEOMETRIC = MeanTransform(
    MeanKind.geometric.value,
    _is_positive,
    np.log,
    lambda lo, hi: (np.exp(lo), np.exp(hi)),
)


def _harmonic_inverse(lo: np.floating, hi: np.floating) -> tuple[Any, Any]:
    # reciprocal reverses the order: the transformed low bound becomes the high one
    if lo <= 0:
        # the reciprocal-space interval reaches zero, so the mean is unbounded above
        return np.reciprocal(hi), None
    return np.reciprocal(hi), np.reciprocal(lo)


HARMONIC = MeanTransform(
    MeanKind.harmonic.value,
    _is_positive,
    np.reciprocal,
    _harmonic_inverse,
)

_TRANSFORMS = {
    MeanKind.arithmetic: ARITHMETIC,
    MeanKind.geometric: GEOMETRIC,
    MeanKind.harmonic: HARMONIC,
}


def ci(confidence: Any, data: Iterable[Any], kind: MeanKind | str = MeanKind.arithmetic) -> Interval:
    r"""
    Confidence interval for the mean of ``data``.

    Parameters
    ----------
    confidence : Confidence or float
        Confidence specification (a bare float is two-sided).
    data : iterable
        Sample values, consumed once.
    kind : {"arithmetic", "geometric", "harmonic"}, default "arithmetic"
        Which mean to estimate.

    Returns
    -------
    Interval

    Raises
    ------
    ValueError
        If ``kind`` is unknown.
    InvalidInputData, TooFewSamples, FloatConversionError
        See :func:`ci_with_transforms`.
    """
    try:
        transform = _TRANSFORMS[MeanKind(kind)]
    except ValueError:
        raise ValueError(f"kind must be one of 'arithmetic', 'geometric', 'harmonic', got {kind!r}") from None
    return transform.ci(confidence, data)


def arithmetic_ci(confidence: Any, data: Iterable[Any]) -> Interval:
    """Confidence interval for the arithmetic mean."""
    return ARITHMETIC.ci(confidence, data)


def geometric_ci(confidence: Any, data: Iterable[Any]) -> Interval:
    """Confidence interval for the geometric mean (all values must be positive)."""
    return GEOMETRIC.ci(confidence, data)


def harmonic_ci(confidence: Any, data: Iterable[Any]) -> Interval:
    r"""
    Confidence interval for the harmonic mean (all values must be positive).

    When the lower bound of the interval on the reciprocals is not positive,
    the harmonic mean has no finite upper bound and the result is
    ``Interval.lower_bounded(low)``.

    Examples
    --------
    >>> harmonic_ci(0.95, [1.0, 100.0]).high is None
    True
    """
    return HARMONIC.ci(confidence, data)


__all__ = [
    "MeanKind",
    "MeanTransform",
    "ARITHMETIC",
    "GEOMETRIC",
    "HARMONIC",
    "ci_with_transforms",
    "ci",
    "arithmetic_ci",
    "geometric_ci",
    "harmonic_ci",
]
