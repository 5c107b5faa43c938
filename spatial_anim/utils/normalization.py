from __future__ import annotations


def normalize_signed(value: float, vmin: float, vmax: float) -> float:
    """Map signed value to [0,1] with 0.5 as zero midpoint.

    Assumes vmin < 0 < vmax; clamps out-of-range.
    """
    if vmax == vmin:
        return 0.5
    # Map to [-1,1] then to [0,1]
    span = max(abs(vmin), abs(vmax))
    x = max(-span, min(span, value)) / span
    return 0.5 * (x + 1.0)


def normalize_unsigned(value: float, vmin: float, vmax: float) -> float:
    if vmax == vmin:
        return 0.0
    x = (value - vmin) / (vmax - vmin)
    return max(0.0, min(1.0, float(x)))


def edge_width_from_strength(value: float, min_w: float = 1.0, max_w: float = 6.0) -> float:
    a = normalize_unsigned(value, 0.0, 1.0)
    return min_w + a * (max_w - min_w)


def polarity_band(polarity: float | None) -> str:
    """Five-way sentiment bucket for a polarity in roughly -1..1."""
    p = 0.0 if polarity is None else float(polarity)
    if p < -0.5:
        return "strong_negative"
    if p < -0.1:
        return "negative"
    if p < 0.1:
        return "neutral"
    if p < 0.5:
        return "positive"
    return "strong_positive"
