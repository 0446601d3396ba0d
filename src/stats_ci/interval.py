r"""
stats_ci.interval
=================
Immutable interval value returned by every estimator.

An :class:`Interval` stores a ``(left, right)`` pair where either side may be
``None`` to mean unbounded. The default constructor enforces
``left <= right``; :meth:`Interval.new_unordered` waives the check for types
whose ordering is custom or partial (e.g. quantile intervals computed on data
sorted with a ``key``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

__all__ = ["Interval"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Interval(Generic[T]):
    r"""
    Closed interval :math:`[\text{left}, \text{right}]`, possibly one-sided.

    Parameters
    ----------
    left : T or None
        Lower bound, or ``None`` when unbounded below.
    right : T or None
        Upper bound, or ``None`` when unbounded above.

    Raises
    ------
    ValueError
        If both bounds are ``None`` or if ``left > right``.

    Notes
    -----
    Equality only compares the bounds, so an interval built with
    :meth:`new_unordered` equals an ordered one holding the same pair.

    Examples
    --------
    >>> ci = Interval(1.0, 3.0)
    >>> 2.0 in ci, ci.width()
    (True, 2.0)
    >>> Interval.lower_bounded(0.5).contains(10.0)
    True
    """

    left: Optional[T]
    right: Optional[T]
    ordered: bool = field(default=True, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.left is None and self.right is None:
            raise ValueError("an interval needs at least one bound")
        if self.ordered and self.left is not None and self.right is not None:
            if self.right < self.left:
                raise ValueError(f"interval bounds out of order: low={self.left!r} > high={self.right!r}")

    # constructors
    @classmethod
    def new_unordered(cls, left: T, right: T) -> "Interval[T]":
        """Store ``(left, right)`` as given, without checking their order."""
        return cls(left, right, ordered=False)

    @classmethod
    def from_pair(cls, a: T, b: T) -> "Interval[T]":
        """Build an ordered interval from two bounds given in any order."""
        return cls(b, a) if b < a else cls(a, b)

    @classmethod
    def lower_bounded(cls, low: T) -> "Interval[T]":
        r"""One-sided interval :math:`[\text{low}, +\infty)`."""
        return cls(low, None)

    @classmethod
    def upper_bounded(cls, high: T) -> "Interval[T]":
        r"""One-sided interval :math:`(-\infty, \text{high}]`."""
        return cls(None, high)

    # accessors
    @property
    def low(self) -> Optional[T]:
        return self.left

    @property
    def high(self) -> Optional[T]:
        return self.right

    @property
    def is_two_sided(self) -> bool:
        return self.left is not None and self.right is not None

    @property
    def is_one_sided(self) -> bool:
        return not self.is_two_sided

    @property
    def is_ordered(self) -> bool:
        return self.ordered

    def contains(self, x: Any) -> bool:
        """Return True if ``left <= x <= right`` (missing bounds always pass)."""
        if self.left is not None and x < self.left:
            return False
        if self.right is not None and self.right < x:
            return False
        return True

    def __contains__(self, x: Any) -> bool:
        return self.contains(x)

    def width(self) -> Any:
        """
        Distance between the bounds.

        Raises
        ------
        ValueError
            If the interval is one-sided.
        """
        if not self.is_two_sided:
            raise ValueError("width is undefined for a one-sided interval")
        return self.right - self.left

    def to_tuple(self) -> tuple[Optional[T], Optional[T]]:
        return self.left, self.right

    def __str__(self) -> str:
        lo = "-inf" if self.left is None else str(self.left)
        hi = "+inf" if self.right is None else str(self.right)
        open_, close = ("(" if self.left is None else "["), (")" if self.right is None else "]")
        return f"{open_}{lo}, {hi}{close}"
