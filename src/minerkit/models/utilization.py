"""
GPU Memory Utilization Planning

Maps a model id and the free memory of its GPU to the memory-utilization
ratio handed to the inference engine.

The policy is an ordered rule table. Each rule names a model-family
substring, a memory threshold (MB) and an amount to reserve (MB). Rules are
evaluated top to bottom and the first one whose family occurs in the model
id AND whose threshold is strictly below the available memory wins:

    ratio = (threshold - reserved) / available

When nothing matches, the default rule caps the engine at 12000 MB minus the
same 1000 MB reserve. The default is not clamped, so any GPU with less than
11000 MB free gets a ratio above 1.

Ratios are truncated toward zero to two decimals.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from typing import Optional, Sequence

from .schema import UtilizationPlan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatioRule:
    """One row of the utilization policy."""

    family: str          # substring matched against the model id
    threshold_mb: int    # rule applies only when available memory exceeds this
    reserved_mb: int = 1000

    def matches(self, model_id: str, available_mb: int) -> bool:
        return self.family in model_id and available_mb > self.threshold_mb


# Evaluated in order; the first matching rule wins.
RATIO_RULES = (
    RatioRule("mixtral-8x7b-gptq", 32000),
    RatioRule("yi-34b-gptq", 40000),
    RatioRule("70b", 44000),
    RatioRule("8b", 19000),
    RatioRule("pro-mistral-7b", 18000),
)

DEFAULT_RULE_NAME = "default"
DEFAULT_CAP_MB = 12000
DEFAULT_RESERVED_MB = 1000

RATIO_PRECISION = Decimal("0.01")


def _truncate_ratio(numerator: int, denominator: int) -> float:
    ratio = Decimal(numerator) / Decimal(denominator)
    return float(ratio.quantize(RATIO_PRECISION, rounding=ROUND_DOWN))


def plan_utilization(
    model_id: str,
    available_mb: int,
    rules: Optional[Sequence[RatioRule]] = None,
) -> UtilizationPlan:
    """
    Compute the utilization ratio and report which rule produced it.

    Args:
        model_id: Catalog model id
        available_mb: Free memory on the target GPU in MB
        rules: Ordered rule table (defaults to RATIO_RULES)

    Returns:
        UtilizationPlan with the truncated ratio and the matched rule's family

    Raises:
        ValueError: If available_mb is not positive
    """
    if available_mb <= 0:
        raise ValueError(f"available_mb must be positive, got {available_mb}")

    rules = RATIO_RULES if rules is None else rules

    for rule in rules:
        if rule.matches(model_id, available_mb):
            ratio = _truncate_ratio(rule.threshold_mb - rule.reserved_mb, available_mb)
            plan = UtilizationPlan(ratio=ratio, rule=rule.family)
            break
    else:
        ratio = _truncate_ratio(DEFAULT_CAP_MB - DEFAULT_RESERVED_MB, available_mb)
        plan = UtilizationPlan(ratio=ratio, rule=DEFAULT_RULE_NAME)

    if not 0 < plan.ratio <= 1:
        logger.warning(
            f"GPU memory utilization ratio {plan.ratio:.2f} for {model_id} is outside (0, 1] "
            f"with {available_mb}MB available"
        )
    return plan


def compute_ratio(
    model_id: str,
    available_mb: int,
    rules: Optional[Sequence[RatioRule]] = None,
) -> float:
    """
    GPU memory utilization ratio for a model on a GPU with available_mb free.

    Example:
        >>> compute_ratio("yi-34b-gptq", 45000)
        0.86
        >>> compute_ratio("unknown-model-x", 15000)
        0.73
    """
    return plan_utilization(model_id, available_mb, rules).ratio
