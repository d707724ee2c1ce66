#!/usr/bin/env python3
"""
General utilities for Tiny World.
"""
from typing import Optional


def try_float(val) -> Optional[float]:
    if val is None or isinstance(val, bool):
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None
