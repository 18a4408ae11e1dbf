"""
Interpolation Smoothing for N-gram Language Models

This module holds the pieces of the recursive linear interpolation used by
the language model: the data-dependent interpolation weight, a single
interpolation step, and the transform that moves conditional estimates into
the log domain.
"""

from enum import Enum
from typing import Union
import math


class LogTransform(Enum):
    """Available log-domain transforms for conditional estimates."""
    LOG2 = "log2"       # log base 2 of the estimate
    SCALED = "scaled"   # estimate / ln(2), the legacy transform


def interpolation_weight(context_count: float, context_size: float,
                         lambda_factor: float) -> float:
    """
    Weight given to the evidence of a context when interpolating.

    lambda = count / (count + lambda_factor * size)

    The weight grows toward 1 as the context count grows relative to the
    number of distinct continuations scaled by the lambda factor.

    Args:
        context_count: Total continuations observed after the context
        context_size: Number of distinct continuations
        lambda_factor: Smoothing strength

    Returns:
        Interpolation weight in [0, 1]
    """
    return context_count / (context_count + lambda_factor * context_size)


def interpolate(count: float, context_count: float, weight: float,
                lower_order: float) -> float:
    """
    One Jelinek-Mercer step.

    P = lambda * count / context_count + (1 - lambda) * P_lower
    """
    return weight * (count / context_count) + (1.0 - weight) * lower_order


def to_log_domain(estimate: float, transform: LogTransform = LogTransform.LOG2) -> float:
    """
    Transform a conditional estimate into a log-domain score.

    Args:
        estimate: Conditional estimate in [0, 1]
        transform: Which transform to apply

    Returns:
        Log-domain score (-inf for a zero estimate under LOG2)
    """
    if transform == LogTransform.LOG2:
        return math.log2(estimate) if estimate > 0 else float('-inf')
    elif transform == LogTransform.SCALED:
        return estimate / math.log(2.0)
    else:
        raise ValueError(f"Unknown log transform: {transform}")


def get_log_transform(value: Union[str, LogTransform]) -> LogTransform:
    """Resolve a transform name (as used on the command line) to its enum."""
    if isinstance(value, LogTransform):
        return value
    try:
        return LogTransform(value.lower())
    except ValueError:
        choices = ", ".join(t.value for t in LogTransform)
        raise ValueError(f"Unknown log transform: {value!r} (choose from {choices})") from None
