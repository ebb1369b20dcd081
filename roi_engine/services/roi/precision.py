"""
Decimal precision helpers.

Money figures are produced at the default 28-digit precision. Totals are
summed in a much wider context so that addition and subtraction are exact
for any realistic magnitude, which makes summing order irrelevant: a total
built top-down equals the same total built row by row.
"""

from collections.abc import Iterable
from contextlib import contextmanager
from decimal import Decimal, localcontext
from typing import Iterator

EXACT_PRECISION = 120


@contextmanager
def exact_arithmetic() -> Iterator[None]:
    """Context in which adding engine-produced Decimals never rounds."""
    with localcontext() as ctx:
        ctx.prec = EXACT_PRECISION
        yield


def exact_sum(values: Iterable[Decimal]) -> Decimal:
    with exact_arithmetic():
        return sum(values, Decimal(0))
