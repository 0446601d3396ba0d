r"""
stats_ci.stats_engine
=====================
Evaluate several confidence intervals over one sample in a single call.

This module defines:

- :class:`StatsContext`: a typed, explicit configuration object shared by all metrics.
- :class:`FnMetric`: a frozen adapter that names a metric function.
- :class:`StatsEngine`: an orchestrator that evaluates one or more metrics.

Built-in metrics are :func:`ci_arithmetic_mean`, :func:`ci_geometric_mean`,
:func:`ci_harmonic_mean`, :func:`ci_quantiles` and :func:`ci_proportion`.

See Also
--------
stats_ci.mean, stats_ci.proportion, stats_ci.quantile
    The estimators the metrics delegate to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Iterable, Optional, Protocol, Sequence, TypeVar

from . import mean as _mean
from . import proportion as _proportion
from . import quantile as _quantile
from .confidence import Confidence, Sided
from .errors import CIError
from .interval import Interval
from .proportion import ProportionMethod

# Local logger per engine module
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


_QUANTILES = (0.25, 0.5, 0.75)  # default quantiles


@dataclass(slots=True)
class StatsContext:
    r"""
    Shared, explicit configuration for the interval metrics.

    Attributes
    ----------
    confidence : float, default 0.95
        Confidence level in :math:`(0, 1)`.
    sided : {"two-sided", "one-sided"}, default "two-sided"
        Sidedness used by the mean and quantile metrics. Proportion intervals
        are always two-sided.
    quantiles : tuple of float, default ``(0.25, 0.5, 0.75)``
        Quantiles evaluated by :func:`ci_quantiles`.
    proportion_method : {"wilson", "normal"}, default "wilson"
        Formula used by :func:`ci_proportion`.
    predicate : callable, optional
        Success test for :func:`ci_proportion`. Without it the metric is skipped.

    Examples
    --------
    >>> ctx = StatsContext(confidence=0.9, quantiles=(0.5,))
    >>> ctx.confidence_spec
    Confidence(level=0.9, sided=<Sided.two_sided: 'two-sided'>)
    """

    confidence: float = 0.95
    sided: Sided = Sided.two_sided
    quantiles: tuple[float, ...] = _QUANTILES
    proportion_method: ProportionMethod = ProportionMethod.wilson
    predicate: Optional[Callable[[Any], bool]] = None

    def with_overrides(self, **changes) -> "StatsContext":
        r"""
        Return a shallow copy with selected fields replaced.

        Examples
        --------
        >>> ctx = StatsContext()
        >>> ctx.with_overrides(confidence=0.8).confidence
        0.8
        """
        return replace(self, **changes)

    @property
    def confidence_spec(self) -> Confidence:
        """The :class:`~stats_ci.confidence.Confidence` built from ``confidence`` and ``sided``."""
        return Confidence(self.confidence, Sided(self.sided))

    def __post_init__(self) -> None:
        r"""
        Validate field ranges (confidence, sided, quantiles, proportion_method).

        Raises
        ------
        ValueError
            If any field is outside its allowed range.
        """
        if not (0.0 < self.confidence < 1.0):
            raise ValueError("confidence must be in (0,1)")
        if self.sided not in (Sided.one_sided, Sided.two_sided):
            raise ValueError(f"sided must be 'one-sided' or 'two-sided', got {self.sided!r}")
        if any(not (0.0 < q < 1.0) for q in self.quantiles):
            raise ValueError("quantiles must be in (0,1)")
        if self.proportion_method not in (ProportionMethod.wilson, ProportionMethod.normal):
            raise ValueError(f"proportion_method must be 'wilson' or 'normal', got {self.proportion_method!r}")
        if self.predicate is not None and not callable(self.predicate):
            raise ValueError("predicate must be callable")


class Metric(Protocol):
    r"""
    Protocol for metric callables used by :class:`StatsEngine`.

    A metric exposes a ``name`` attribute and is callable as:

    ``metric(x: Sequence, ctx: StatsContext) -> Any``
    """

    name: str

    def __call__(self, x: Sequence[Any], ctx: StatsContext, /) -> Any: ...


R = TypeVar("R")


@dataclass(frozen=True)
class FnMetric(Generic[R]):
    r"""
    Lightweight adapter that binds a human-readable ``name`` to a metric function.

    Parameters
    ----------
    name : str
        Key under which the metric result is stored in :meth:`StatsEngine.compute`.
    fn : callable
        Function with signature ``fn(x, ctx: StatsContext) -> R``.
    doc : str, optional
        Short description.

    Examples
    --------
    >>> m = FnMetric("n", lambda a, ctx: len(a))
    >>> m([1, 2, 3], StatsContext())
    3
    """

    name: str
    fn: Callable[[Sequence[Any], StatsContext], R]
    doc: str = ""

    def __call__(self, x: Sequence[Any], ctx: StatsContext) -> R:
        return self.fn(x, ctx)


class StatsEngine:
    r"""
    Orchestrator that evaluates a set of interval metrics over one sample.

    Parameters
    ----------
    metrics : iterable of Metric
        Callables with a ``name`` and signature ``metric(x, ctx)``.

    Notes
    -----
    A metric that cannot produce an interval for the sample (a
    :class:`~stats_ci.errors.CIError`, or a missing context field) is left
    out of the result instead of failing the whole computation.

    Examples
    --------
    >>> eng = StatsEngine([FnMetric("mean", ci_arithmetic_mean)])
    >>> sorted(eng.compute([1.0, 2.0, 3.0]))
    ['mean']
    """

    def __init__(self, metrics: Iterable[Metric]):
        self._metrics = list(metrics)

    def available(self) -> tuple[str, ...]:
        return tuple(m.name for m in self._metrics)

    def compute(
        self,
        x: Iterable[Any],
        ctx: Optional[StatsContext] = None,
        select: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        r"""
        Evaluate all registered metrics on ``x``.

        Parameters
        ----------
        x : iterable
            Sample values; materialised once so every metric sees the same data.
        ctx : StatsContext, optional
            Context parameters. If None, one is built from **kwargs.
        select : sequence of str, optional
            If given, compute only the metrics with these names.
        **kwargs :
            Used to build a StatsContext if ctx is None.

        Returns
        -------
        dict
            Mapping from metric name to computed value.
        """
        ctx = _ensure_ctx(ctx) if ctx is not None else StatsContext(**kwargs)
        data = list(x)

        metrics_to_compute = (
            self._metrics if select is None else [m for m in self._metrics if m.name in set(select)]
        )

        out: dict[str, Any] = {}
        for m in metrics_to_compute:
            try:
                result = m(data, ctx)
            except CIError as e:
                logger.debug(f"Skipping metric {m.name}: {e}")
                continue
            except ValueError as e:
                if "requires ctx." in str(e):
                    logger.debug(f"Skipping metric {m.name}: {e}")
                    continue
                raise
            except Exception:
                logger.exception(f"Error computing metric {m.name}")
                continue

            # metrics with nothing to report (e.g. all quantiles unresolvable)
            if result is None or (isinstance(result, dict) and len(result) == 0):
                logger.debug(f"Metric '{m.name}' returned no interval, skipping")
                continue
            out[m.name] = result

        return out


def _ensure_ctx(ctx: Any) -> StatsContext:
    r"""
    Normalize arbitrary context inputs into a :class:`StatsContext`.

    Parameters
    ----------
    ctx : Any
        A :class:`StatsContext`, mapping, object with attributes, or ``None``.

    Returns
    -------
    StatsContext

    Raises
    ------
    TypeError
        If ``ctx`` cannot be interpreted as configuration data.
    """
    if isinstance(ctx, StatsContext):
        return ctx
    if ctx is None:
        return StatsContext()
    if isinstance(ctx, dict):
        return StatsContext(**ctx)
    try:
        data = dict(vars(ctx))
    except TypeError:
        raise TypeError("ctx must be a StatsContext, dict, None, or an object with attributes") from None
    return StatsContext(**data)


def ci_arithmetic_mean(x: Sequence[Any], ctx: Any) -> Interval:
    """Arithmetic-mean CI (Student-t)."""
    ctx = _ensure_ctx(ctx)
    return _mean.ARITHMETIC.ci(ctx.confidence_spec, x)


def ci_geometric_mean(x: Sequence[Any], ctx: Any) -> Interval:
    """Geometric-mean CI; skipped by the engine when the sample has non-positive values."""
    ctx = _ensure_ctx(ctx)
    return _mean.GEOMETRIC.ci(ctx.confidence_spec, x)


def ci_harmonic_mean(x: Sequence[Any], ctx: Any) -> Interval:
    """Harmonic-mean CI; skipped by the engine when the sample has non-positive values."""
    ctx = _ensure_ctx(ctx)
    return _mean.HARMONIC.ci(ctx.confidence_spec, x)


def ci_quantiles(x: Sequence[Any], ctx: Any) -> dict[float, Interval]:
    r"""
    Order-statistic CIs for each of :attr:`StatsContext.quantiles`.

    The sample is sorted once. Quantiles whose interval cannot be resolved
    within the sample are omitted from the mapping.

    Returns
    -------
    dict[float, Interval]
        Mapping :math:`q \mapsto` interval.
    """
    ctx = _ensure_ctx(ctx)
    confidence = ctx.confidence_spec
    ordered = sorted(x)
    out: dict[float, Interval] = {}
    for q in ctx.quantiles:
        interval = _quantile.ci_sorted(confidence, ordered, q)
        if interval is not None:
            out[q] = interval
    return out


def ci_proportion(x: Sequence[Any], ctx: Any) -> Interval:
    r"""
    Two-sided CI for the proportion of elements satisfying :attr:`StatsContext.predicate`.

    Raises
    ------
    ValueError
        If the context has no predicate.
    """
    ctx = _ensure_ctx(ctx)
    if ctx.predicate is None:
        raise ValueError("ci_proportion requires ctx.predicate")
    return _proportion.ci_by_predicate(ctx.confidence, x, ctx.predicate, ctx.proportion_method)


def build_default_engine(
    include_means: bool = True,
    include_proportion: bool = True,
) -> StatsEngine:
    r"""
    Construct a :class:`StatsEngine` with the built-in interval metrics.

    Parameters
    ----------
    include_means : bool, default True
        Include geometric and harmonic mean CIs (the arithmetic one is always present).
    include_proportion : bool, default True
        Include :func:`ci_proportion` (only reported when a predicate is set).

    Returns
    -------
    StatsEngine
    """
    metrics: list[Metric] = [
        FnMetric[Interval]("ci_mean", ci_arithmetic_mean, "Student-t CI for the arithmetic mean"),
        FnMetric[dict[float, Interval]]("ci_quantiles", ci_quantiles, "Order-statistic CIs for quantiles"),
    ]
    if include_means:
        metrics.extend(
            [
                FnMetric[Interval]("ci_geometric_mean", ci_geometric_mean, "Student-t CI for the geometric mean"),
                FnMetric[Interval]("ci_harmonic_mean", ci_harmonic_mean, "Student-t CI for the harmonic mean"),
            ]
        )
    if include_proportion:
        metrics.append(FnMetric[Interval]("ci_proportion", ci_proportion, "Wilson/normal CI for a proportion"))
    return StatsEngine(metrics)


# Build a default engine at import time
DEFAULT_ENGINE = build_default_engine(
    include_means=True,
    include_proportion=True,
)

__all__ = [
    "StatsContext",
    "Metric",
    "FnMetric",
    "StatsEngine",
    "ci_arithmetic_mean",
    "ci_geometric_mean",
    "ci_harmonic_mean",
    "ci_quantiles",
    "ci_proportion",
    "build_default_engine",
    "DEFAULT_ENGINE",
]
