"""
Utility functions for VolleySplit
"""
from __future__ import annotations
import os
import uuid
from datetime import date


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def safe_float(x: str, default: float = 0.0) -> float:
    """Convert string to float safely, returning default on error"""
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def generate_id() -> str:
    """Short opaque identifier for players, sessions, events and payments"""
    return uuid.uuid4().hex[:12]


def normalize_name(name: str) -> str:
    """Join key used to recognise one person across events"""
    return name.strip()


def fmt_money(amount: float) -> str:
    """One decimal place, as shown in the ledger"""
    return f"{amount:.1f}"


def app_dir() -> str:
    """
    Get application data directory: $VOLLEYSPLIT_HOME or ~/.volleysplit
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("VOLLEYSPLIT_HOME") or os.path.join(os.path.expanduser("~"), ".volleysplit")
    os.makedirs(path, exist_ok=True)
    return path
