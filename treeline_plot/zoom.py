from __future__ import annotations

from treeline_plot.scales import Viewport, ZoomTransform


MIN_ZOOM = 1.0


def constrain(transform: ZoomTransform, viewport: Viewport) -> ZoomTransform:
    """Clamp ``transform`` so the zoomed content always covers the viewport."""
    k = max(MIN_ZOOM, float(transform.k))
    x = _clamp(float(transform.x), viewport.width * (1.0 - k), 0.0)
    y = _clamp(float(transform.y), viewport.height * (1.0 - k), 0.0)
    return ZoomTransform(x=x, y=y, k=k)


def zoom_at(transform: ZoomTransform, factor: float, anchor_x: float, viewport: Viewport) -> ZoomTransform:
    """Scale by ``factor`` around the pixel column ``anchor_x``."""
    if factor <= 0:
        raise ValueError("zoom factor must be > 0")
    k = max(MIN_ZOOM, transform.k * float(factor))
    anchor = float(anchor_x)
    # Keep the content under the anchor in place.
    x = anchor - (anchor - transform.x) * (k / transform.k)
    return constrain(ZoomTransform(x=x, y=transform.y, k=k), viewport)


def pan_by(transform: ZoomTransform, delta_x: float, viewport: Viewport) -> ZoomTransform:
    return constrain(ZoomTransform(x=transform.x + float(delta_x), y=transform.y, k=transform.k), viewport)


def _clamp(value: float, lo: float, hi: float) -> float:
    if lo > hi:
        lo, hi = hi, lo
    return min(hi, max(lo, value))
