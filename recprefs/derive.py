# recprefs/derive.py
# Pure helpers behind the derived settings. Nothing here touches the store.
from __future__ import annotations
import re
from datetime import datetime
from typing import Iterable, Optional, Tuple

from .device import DisplayMetrics, Rotation

_INT_RE = re.compile(r"[+-]?[0-9]+\Z")
INT_MIN, INT_MAX = -2**31, 2**31 - 1


def parse_int(raw, default: int) -> int:
    """Stored numeric text -> int, or ``default`` for anything unparseable."""
    if raw is None or isinstance(raw, bool):
        return default
    m = _INT_RE.match(str(raw).strip())
    if not m:
        return default
    value = int(m.group(0))
    return value if INT_MIN <= value <= INT_MAX else default


def aspect_ratio(metrics: DisplayMetrics) -> float:
    w, h = metrics.width, metrics.height
    if w <= 0 or h <= 0:
        return 1.0
    return max(w, h) / min(w, h)


def video_height(width: int, metrics: DisplayMetrics) -> int:
    # Portrait displays grow the long side from the stored width, landscape
    # displays shrink it, so the capture keeps the display's proportions.
    ratio = aspect_ratio(metrics)
    if metrics.width > metrics.height:
        return int(round(width / ratio))
    return int(round(width * ratio))


def orient(width: int, height: int, orientation: Optional[str], rotation: Rotation) -> Tuple[int, int]:
    if orientation == "portrait":
        return width, height
    if orientation == "landscape":
        return height, width
    # "auto" and anything unrecognised
    if rotation in (Rotation.ROTATION_0, Rotation.ROTATION_180):
        return width, height
    return height, width


def normalize_prefix(prefix: str) -> str:
    if not prefix or not prefix.strip():
        return ""
    if prefix.endswith("_"):
        return prefix
    return prefix + "_"


def pick_initial_width(candidates: Iterable[int], device_width: int) -> int:
    """Largest candidate not wider than the display, else the display width."""
    fitting = [c for c in candidates if c <= device_width]
    return max(fitting) if fitting else device_width


def _field(letter: str, n: int, dt: datetime) -> Optional[str]:
    if letter == "y":
        return f"{dt.year % 100:02d}" if n == 2 else str(dt.year).zfill(n)
    if letter == "M":
        if n == 3:
            return dt.strftime("%b")
        if n >= 4:
            return dt.strftime("%B")
        return str(dt.month).zfill(n)
    if letter == "d":
        return str(dt.day).zfill(n)
    if letter == "H":
        return str(dt.hour).zfill(n)
    if letter == "h":
        return str(dt.hour % 12 or 12).zfill(n)
    if letter == "m":
        return str(dt.minute).zfill(n)
    if letter == "s":
        return str(dt.second).zfill(n)
    if letter == "S":
        return str(dt.microsecond // 1000).zfill(n)
    if letter == "a":
        return "AM" if dt.hour < 12 else "PM"
    if letter == "E":
        return dt.strftime("%a") if n <= 3 else dt.strftime("%A")
    return None


def format_date_pattern(pattern: str, dt: datetime) -> str:
    """Format ``dt`` with a ``yyyyMMdd_hhmmss`` style pattern.

    Text in single quotes is literal, ``''`` is a quote. Letters without a
    date meaning are copied through unchanged.
    """
    out = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "'":
            if i + 1 < n and pattern[i + 1] == "'":
                out.append("'"); i += 2
                continue
            i += 1
            while i < n:
                if pattern[i] == "'":
                    if i + 1 < n and pattern[i + 1] == "'":
                        out.append("'"); i += 2
                        continue
                    i += 1
                    break
                out.append(pattern[i]); i += 1
            continue
        if c.isascii() and c.isalpha():
            j = i
            while j < n and pattern[j] == c:
                j += 1
            value = _field(c, j - i, dt)
            out.append(value if value is not None else pattern[i:j])
            i = j
            continue
        out.append(c)
        i += 1
    return "".join(out)
