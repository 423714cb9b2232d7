"""Integer arithmetic for currency amounts.

All prices, budgets and totals are int minor units (paise). No float, no Decimal.
"""

CURRENCY_SYMBOL = "₹"


def validate_amount(amount: int) -> None:
    """Validate that an amount is a non-negative integer number of minor units."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Amount must be an integer number of minor units, got {amount!r}")
    if amount < 0:
        raise ValueError(f"Amount must not be negative, got {amount}")


def total_cost(price: int, quantity: int) -> int:
    """Exact total for `quantity` tickets at `price` each."""
    validate_amount(price)
    return price * quantity


def minor_to_display(amount: int) -> str:
    """Convert minor units to display string: 250000 -> '₹2,500.00', -1200 -> '-₹12.00'."""
    if amount < 0:
        abs_amount = -amount
        return f"-{CURRENCY_SYMBOL}{abs_amount // 100:,}.{abs_amount % 100:02d}"
    return f"{CURRENCY_SYMBOL}{amount // 100:,}.{amount % 100:02d}"
