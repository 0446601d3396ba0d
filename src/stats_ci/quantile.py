r"""
stats_ci.quantile
=================
Distribution-free confidence intervals for quantiles.

For a sorted sample :math:`x_{(1)} \le \dots \le x_{(n)}` and quantile
:math:`q`, the normal approximation to the binomial count of observations
below the true quantile gives the ranks

.. math::
   r_\text{lo} = \lceil nq - z\sqrt{nq(1-q)}\,\rceil, \qquad
   r_\text{hi} = \lceil nq + z\sqrt{nq(1-q)}\,\rceil,

and the interval :math:`[x_{(r_\text{lo})}, x_{(r_\text{hi})}]`. When the
sample is too small or a rank falls outside :math:`[1, n]`, no interval is
returned (``None``); this is an expected outcome, not an error.

Examples
--------
>>> data = list(range(1, 16))
>>> ci(0.95, data, 0.5)
Interval(left=4, right=12)
>>> ci(Confidence.two_sided(0.5), data, 0.2)
Interval(left=2, right=5)
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from .confidence import Confidence, ensure_confidence
from .errors import InvalidInputData
from .interval import Interval
from .utils import z_value

# Local logger per engine module
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

T = TypeVar("T")

_MIN_SAMPLES = 3


def ci_sorted(confidence: Confidence | float, sorted_data: Sequence[T], quantile: float) -> Optional[Interval[T]]:
    r"""
    Confidence interval for ``quantile`` over data already sorted ascending.

    Use this directly when the data is known to be sorted, or when position in
    the sequence is itself the intended ordering (e.g. order of arrival).

    Parameters
    ----------
    confidence : Confidence or float
        Confidence specification (a bare float is two-sided).
    sorted_data : sequence
        Sample sorted under the desired ordering.
    quantile : float
        Target quantile in :math:`(0, 1)` (``0.5`` for the median).

    Returns
    -------
    Interval or None
        Interval built with :meth:`Interval.new_unordered` from the two order
        statistics, or ``None`` if there are fewer than 3 samples or a rank
        falls outside the sample.

    Raises
    ------
    ValueError
        If ``quantile`` is outside :math:`(0, 1)`.
    InvalidInputData
        If an element is not equal to itself (NaN), so has no place in the order.
    """
    if not (0.0 < quantile < 1.0):
        raise ValueError(f"quantile must be in (0,1), got {quantile!r}")
    confidence = ensure_confidence(confidence)

    for x in sorted_data:
        if x != x:
            logger.debug(f"Rejected unorderable sample element {x!r}")
            raise InvalidInputData(x)

    n = len(sorted_data)
    if n < _MIN_SAMPLES:
        logger.debug(f"Quantile CI needs at least {_MIN_SAMPLES} samples, got {n}")
        return None

    z = z_value(confidence)
    center = n * quantile
    mid_span = z * math.sqrt(n * quantile * (1.0 - quantile))
    # 1-indexed order statistics
    lo_rank = math.ceil(center - mid_span)
    hi_rank = math.ceil(center + mid_span)

    if lo_rank < 1 or hi_rank > n:
        logger.debug(f"Quantile CI unresolvable: ranks ({lo_rank}, {hi_rank}) outside [1, {n}]")
        return None

    return Interval.new_unordered(sorted_data[lo_rank - 1], sorted_data[hi_rank - 1])


def ci(
    confidence: Confidence | float,
    data: Iterable[T],
    quantile: float,
    key: Optional[Callable[[T], Any]] = None,
) -> Optional[Interval[T]]:
    r"""
    Confidence interval for ``quantile`` over unsorted data.

    A sorted copy of ``data`` is made and passed to :func:`ci_sorted`.

    Parameters
    ----------
    confidence : Confidence or float
        Confidence specification (a bare float is two-sided).
    data : iterable
        Sample; elements must be mutually comparable (or comparable through
        ``key``).
    quantile : float
        Target quantile in :math:`(0, 1)`.
    key : callable, optional
        Sort key defining a custom ordering, as for :func:`sorted`.

    Returns
    -------
    Interval or None

    Raises
    ------
    TypeError
        If the elements cannot be ordered.
    ValueError
        If ``quantile`` is outside :math:`(0, 1)`.
    InvalidInputData
        If the sample contains NaN, which :func:`sorted` would place arbitrarily.
    """
    return ci_sorted(confidence, sorted(data, key=key), quantile)


def median_ci(confidence: Confidence | float, data: Iterable[T], key: Optional[Callable[[T], Any]] = None) -> Optional[Interval[T]]:
    """Confidence interval for the median."""
    return ci(confidence, data, 0.5, key=key)


__all__ = ["ci_sorted", "ci", "median_ci"]
