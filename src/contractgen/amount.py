# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Normalize human-readable deposit amounts to yoctoNEAR strings."""

import logging
from decimal import Decimal, InvalidOperation, localcontext

logger = logging.getLogger(__name__)

NEAR_SUFFIX = "NEAR"
YOCTO_PER_NEAR = 10**24
_PRECISION = 80
# Digits of the largest u128 value the payment check can hold.
_MAX_DIGITS = 39


def to_yocto(amount: str) -> str:
    """Convert a deposit literal to an integer string in yoctoNEAR.

    ``"1NEAR"`` becomes ``"1"`` followed by 24 zeros; a literal without
    the unit suffix is already in yoctoNEAR. Fractions are truncated
    toward zero. Unparseable literals and values wider than a u128 log a
    warning and yield ``"0"``.

    Args:
        amount: Raw ``min_deposit`` literal.

    Returns:
        Base-unit integer as a decimal string.
    """
    text = amount.strip()
    if not text:
        return "0"

    multiplier = 1
    if text.endswith(NEAR_SUFFIX):
        multiplier = YOCTO_PER_NEAR
        text = text[: -len(NEAR_SUFFIX)].strip()

    try:
        value = Decimal(text)
    except InvalidOperation:
        logger.warning(f"Failed to parse min_deposit, defaulting to 0 (amount={amount})")
        return "0"
    if not value.is_finite():
        logger.warning(f"Non-finite min_deposit, defaulting to 0 (amount={amount})")
        return "0"
    if value and value.adjusted() + len(str(multiplier)) - 1 >= _MAX_DIGITS:
        logger.warning(f"Out of range min_deposit, defaulting to 0 (amount={amount})")
        return "0"

    try:
        with localcontext() as context:
            context.prec = _PRECISION
            scaled = value * multiplier
        return str(int(scaled))
    except (ArithmeticError, ValueError) as exc:
        logger.warning(
            f"Failed to convert min_deposit, defaulting to 0 (amount={amount} error={exc})"
        )
        return "0"
