"""stats_ci package public API."""

from . import mean, proportion, quantile
from .confidence import Confidence, Sided, ensure_confidence
from .errors import (
    CIError,
    FloatConversionError,
    InvalidConfidenceLevel,
    InvalidInputData,
    InvalidSuccesses,
    TooFewFailures,
    TooFewSamples,
    TooFewSuccesses,
)
from .interval import Interval
from .mean import MeanKind
from .proportion import ProportionMethod
from .stats_engine import DEFAULT_ENGINE, FnMetric, StatsContext, StatsEngine, build_default_engine
from .utils import kahan_add, t_crit, z_crit

__all__ = [
    "mean",
    "proportion",
    "quantile",
    "Confidence",
    "Sided",
    "ensure_confidence",
    "Interval",
    "MeanKind",
    "ProportionMethod",
    "CIError",
    "InvalidInputData",
    "TooFewSamples",
    "InvalidSuccesses",
    "InvalidConfidenceLevel",
    "TooFewSuccesses",
    "TooFewFailures",
    "FloatConversionError",
    "StatsEngine",
    "StatsContext",
    "FnMetric",
    "DEFAULT_ENGINE",
    "build_default_engine",
    "z_crit",
    "t_crit",
    "kahan_add",
]

__version__ = "0.1.0"
