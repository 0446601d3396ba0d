r"""
stats_ci.confidence
===================
Confidence specification shared by all interval estimators.

A :class:`Confidence` pairs a level in :math:`(0, 1)` with a sidedness flag.
For :math:`\alpha = 1 - \text{level}`, the tail probability used to pick the
critical value is :math:`\alpha/2` when two-sided and :math:`\alpha` when
one-sided.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping

from .errors import InvalidConfidenceLevel

__all__ = ["Sided", "Confidence", "ensure_confidence"]


class Sided(str, Enum):
    r"""
    Allocation of the confidence allowance across the distribution tails.

    Attributes
    ----------
    one_sided : str
        The whole :math:`\alpha` goes to a single tail.
    two_sided : str
        :math:`\alpha` is split evenly across both tails.
    """

    one_sided = "one-sided"
    two_sided = "two-sided"


@dataclass(frozen=True, slots=True)
class Confidence:
    r"""
    Confidence level and sidedness.

    Attributes
    ----------
    level : float
        Confidence level in :math:`(0, 1)`.
    sided : {"two-sided", "one-sided"}, default "two-sided"
        Whether :math:`\alpha` is split across both tails.

    Raises
    ------
    InvalidConfidenceLevel
        If ``level`` is not strictly between 0 and 1.

    Examples
    --------
    >>> c = Confidence.two_sided(0.95)
    >>> round(c.tail, 3)
    0.025
    >>> Confidence.one_sided(0.95).tail
    0.050000000000000044
    """

    level: float
    sided: Sided = Sided.two_sided

    def __post_init__(self) -> None:
        if not (0.0 < self.level < 1.0):
            raise InvalidConfidenceLevel(self.level)
        try:
            sided = Sided(self.sided)
        except ValueError:
            raise ValueError(f"sided must be 'one-sided' or 'two-sided', got {self.sided!r}") from None
        # normalise plain strings to the enum
        object.__setattr__(self, "sided", sided)

    @classmethod
    def two_sided(cls, level: float) -> "Confidence":
        return cls(level, Sided.two_sided)

    @classmethod
    def one_sided(cls, level: float) -> "Confidence":
        return cls(level, Sided.one_sided)

    @property
    def alpha(self) -> float:
        r"""Total tail probability :math:`\alpha = 1 - \text{level}`."""
        return 1.0 - self.level

    @property
    def tail(self) -> float:
        r"""Probability allotted to a single tail (:math:`\alpha/2` or :math:`\alpha`)."""
        return self.alpha / 2 if self.is_two_sided else self.alpha

    @property
    def is_two_sided(self) -> bool:
        return self.sided is Sided.two_sided

    def with_overrides(self, **changes) -> "Confidence":
        """Return a copy with selected fields replaced."""
        return replace(self, **changes)

    def __str__(self) -> str:
        return f"{self.level:g} ({self.sided.value})"


def ensure_confidence(confidence: Any) -> Confidence:
    r"""
    Normalise arbitrary confidence inputs into a :class:`Confidence`.

    Parameters
    ----------
    confidence : Confidence, float, or mapping
        A :class:`Confidence` is returned unchanged; a bare number is treated
        as a two-sided level; a mapping supplies ``level`` and optionally
        ``sided``.

    Returns
    -------
    Confidence

    Raises
    ------
    TypeError
        If ``confidence`` cannot be interpreted as a confidence specification.
    InvalidConfidenceLevel
        If the level is outside :math:`(0, 1)`.
    """
    if isinstance(confidence, Confidence):
        return confidence
    if isinstance(confidence, Mapping):
        return Confidence(**dict(confidence))
    # bool is an int subclass but never a meaningful level
    if isinstance(confidence, bool):
        raise TypeError("confidence must be a Confidence, a number in (0,1), or a mapping")
    try:
        level = float(confidence)
    except (TypeError, ValueError):
        raise TypeError("confidence must be a Confidence, a number in (0,1), or a mapping") from None
    return Confidence(level)
