r"""
stats_ci.utils
==============
Critical values and compensated summation.

Critical values are quantiles of the standard normal and Student-:math:`t`
distributions evaluated at :math:`1 - \alpha'`, where
:math:`\alpha = 1 - \text{confidence}` and :math:`\alpha' = \alpha/2` for a
two-sided interval, :math:`\alpha` for a one-sided one.
"""

from __future__ import annotations

from functools import lru_cache

from scipy.stats import norm
from scipy.stats import t as student_t

from .confidence import Confidence

__all__ = ["z_crit", "t_crit", "z_value", "t_value", "kahan_add"]


def _tail(confidence: float, two_sided: bool) -> float:
    if not (0.0 < confidence < 1.0):
        raise ValueError(f"confidence must be in (0,1), got {confidence!r}")
    alpha = 1.0 - confidence
    return alpha / 2 if two_sided else alpha


@lru_cache(maxsize=256)
def z_crit(confidence: float, two_sided: bool = True) -> float:
    r"""
    Normal critical value :math:`z_{1-\alpha'}`.

    Parameters
    ----------
    confidence : float
        Confidence level in :math:`(0, 1)`.
    two_sided : bool, default True
        Split :math:`\alpha` across both tails.

    Returns
    -------
    float

    Raises
    ------
    ValueError
        If ``confidence`` is outside :math:`(0, 1)`.

    Examples
    --------
    >>> round(z_crit(0.95), 2)
    1.96
    """
    return float(norm.ppf(1.0 - _tail(confidence, two_sided)))


@lru_cache(maxsize=1024)
def t_crit(confidence: float, df: int, two_sided: bool = True) -> float:
    r"""
    Student-:math:`t` critical value :math:`t_{1-\alpha',\,\nu}`.

    Parameters
    ----------
    confidence : float
        Confidence level in :math:`(0, 1)`.
    df : int
        Degrees of freedom :math:`\nu \ge 1`.
    two_sided : bool, default True
        Split :math:`\alpha` across both tails.

    Returns
    -------
    float

    Notes
    -----
    As :math:`\nu \to \infty` this converges to :func:`z_crit`.

    Examples
    --------
    >>> round(t_crit(0.95, 10), 3)
    2.228
    """
    if df < 1:
        raise ValueError(f"degrees of freedom must be >= 1, got {df}")
    return float(student_t.ppf(1.0 - _tail(confidence, two_sided), df))


def z_value(confidence: Confidence) -> float:
    """Normal critical value for a :class:`~stats_ci.confidence.Confidence`."""
    return z_crit(confidence.level, confidence.is_two_sided)


def t_value(confidence: Confidence, df: int) -> float:
    """Student-t critical value for a :class:`~stats_ci.confidence.Confidence`."""
    return t_crit(confidence.level, int(df), confidence.is_two_sided)


def kahan_add(total, x, compensation):
    r"""
    One step of Kahan (compensated) summation.

    The arithmetic is carried out in the operands' own type, so passing
    ``numpy.float32`` values keeps the whole accumulation in single precision.

    Parameters
    ----------
    total :
        Running sum.
    x :
        Next value to add.
    compensation :
        Running compensation term (starts at zero).

    Returns
    -------
    tuple
        Updated ``(total, compensation)``.

    Examples
    --------
    >>> s, c = 0.0, 0.0
    >>> for _ in range(10):
    ...     s, c = kahan_add(s, 0.1, c)
    >>> s
    1.0
    """
    y = x - compensation
    t = total + y
    return t, (t - total) - y
