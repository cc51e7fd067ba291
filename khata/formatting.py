"""Display formatting for dates and rupee amounts (en-IN conventions)."""

from datetime import date
from decimal import MAX_PREC, ROUND_HALF_UP, Decimal, localcontext
from typing import Union


def format_date(value: Union[date, str]) -> str:
    """'2023-05-10' -> '10 May 2023'."""
    if isinstance(value, str):
        value = date.fromisoformat(value)
    return value.strftime("%d %b %Y")


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Union[Decimal, int, float], symbol: str = "₹") -> str:
    """
    Format with two decimals and Indian digit grouping.

    >>> format_currency(Decimal("150000"))
    '₹1,50,000.00'
    >>> format_currency(-500)
    '-₹500.00'
    """
    with localcontext() as ctx:
        # quantize() fails once the result has more digits than the context allows
        ctx.prec = MAX_PREC
        value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, fraction = f"{value.copy_abs():.2f}".split(".")
    return f"{sign}{symbol}{_group_indian(whole)}.{fraction}"


def balance_tone(balance: Decimal) -> str:
    """'positive', 'negative' or 'neutral', for colouring balances."""
    if balance > 0:
        return "positive"
    if balance < 0:
        return "negative"
    return "neutral"
