"""Compact number display for activity text and the CLI status line."""

import math

SI_SUFFIXES = ["", "K", "M", "B", "T", "q", "Q", "s", "S"]


def format_number(n: float) -> str:
    if n < 0:
        return "-" + format_number(-n)
    if n < 1000:
        return f"{n:.2f}"
    tier = int(math.log10(n) // 3)
    if tier >= len(SI_SUFFIXES):
        return f"{n:.2e}"
    return f"{n / 10 ** (tier * 3):.3f}{SI_SUFFIXES[tier]}"


def format_currency(n: float) -> str:
    if n < 0:
        return "-" + format_currency(-n)
    if n < 10000:
        return f"${n:,.2f}"
    return f"${format_number(n)}"


def format_quantity(n: float) -> str:
    if n == 0:
        return "0"
    if abs(n) > 1000:
        return f"{n:.2f}"
    if abs(n) > 1:
        return f"{n:.4f}"
    return f"{n:.4g}"
