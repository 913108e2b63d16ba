from __future__ import annotations
from pathlib import Path
from typing import List
import yaml

def load_symbols(path: str | Path) -> List[str]:
    """Read a watchlist file of the form ``symbols: [000001.JJ, 600000.SH]``."""
    p = Path(path)
    doc = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(doc, dict) or not isinstance(doc.get("symbols", []), list):
        raise ValueError(f"{p} must contain a 'symbols' list")
    return [str(s).strip() for s in doc.get("symbols", []) if str(s).strip()]
