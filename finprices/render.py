from __future__ import annotations

import csv
from enum import Enum
from io import StringIO
from typing import Callable, Dict, Iterable, List, Sequence

from .models import PriceRecord

TAB_WIDTH = 4


class OutputFormat(str, Enum):
    hledger = "hledger"
    beancount = "beancount"
    csv = "csv"


def sort_records(records: Iterable[PriceRecord]) -> List[PriceRecord]:
    """Date ascending; on equal dates the symbol sorts descending."""
    by_symbol = sorted(records, key=lambda r: r.symbol, reverse=True)
    return sorted(by_symbol, key=lambda r: r.date)  # stable, keeps the symbol order


def _tabs(width: int, column: int) -> str:
    return "\t" * -(-(column - width) // TAB_WIDTH)


def render_hledger(records: Sequence[PriceRecord], currency: str) -> str:
    cells = [f'"{r.symbol}"' for r in records]
    # next tab stop past the widest symbol, so every cell gets at least one tab
    column = (max((len(c) for c in cells), default=0) // TAB_WIDTH + 1) * TAB_WIDTH
    lines = [
        f"P\t{r.date:%Y-%m-%d}\t{cell}{_tabs(len(cell), column)}{r.price:.2f} {currency}"
        for r, cell in zip(records, cells)
    ]
    return "".join(line + "\n" for line in lines)


def render_beancount(records: Sequence[PriceRecord], currency: str) -> str:
    return "".join(f"{r.date:%Y-%m-%d} price {r.symbol} {r.price:.2f} {currency}\n" for r in records)


def render_csv(records: Sequence[PriceRecord], currency: str) -> str:
    buf = StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(["date", "symbol", "price", "currency"])
    for r in records:
        w.writerow([f"{r.date:%Y-%m-%d}", r.symbol, f"{r.price:.2f}", currency])
    return buf.getvalue()


RENDERERS: Dict[OutputFormat, Callable[[Sequence[PriceRecord], str], str]] = {
    OutputFormat.hledger: render_hledger,
    OutputFormat.beancount: render_beancount,
    OutputFormat.csv: render_csv,
}


def render(records: Iterable[PriceRecord], fmt: OutputFormat = OutputFormat.hledger, currency: str = "CNY") -> str:
    return RENDERERS[OutputFormat(fmt)](sort_records(records), currency)
