from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from treeline_plot.series import DisplayMode, Series, point_value


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


@dataclass(frozen=True)
class LinearScale:
    """Continuous linear map from ``domain`` to ``range``.

    Accepts scalars or numpy arrays. A collapsed domain maps every value to the
    middle of the range; a collapsed range inverts to the middle of the domain.
    """

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value):
        d0, d1 = self.domain
        r0, r1 = self.range
        t = _normalize(value, d0, d1)
        return r0 + t * (r1 - r0)

    def invert(self, pixel):
        d0, d1 = self.domain
        r0, r1 = self.range
        t = _normalize(pixel, r0, r1)
        return d0 + t * (d1 - d0)

    def with_range(self, r0: float, r1: float) -> "LinearScale":
        return LinearScale(domain=self.domain, range=(float(r0), float(r1)))


@dataclass(frozen=True)
class ZoomTransform:
    """Uniform zoom ``k`` followed by translation ``(x, y)``: ``p -> p * k + (x, y)``."""

    x: float = 0.0
    y: float = 0.0
    k: float = 1.0

    @classmethod
    def identity(cls) -> "ZoomTransform":
        return cls()

    def translate(self, tx: float, ty: float) -> "ZoomTransform":
        return ZoomTransform(x=self.x + self.k * float(tx), y=self.y + self.k * float(ty), k=self.k)

    def scale(self, k: float) -> "ZoomTransform":
        return ZoomTransform(x=self.x, y=self.y, k=self.k * float(k))

    def apply_x(self, px: float) -> float:
        return px * self.k + self.x

    def rescale_x(self, scale: LinearScale) -> LinearScale:
        """Stretch ``scale``'s range by this transform, keeping its domain."""
        r0, r1 = scale.range
        return scale.with_range(self.apply_x(r0), self.apply_x(r1))


@dataclass(frozen=True)
class ChartScales:
    x: LinearScale
    y: LinearScale
    viewport: Viewport

    def visible_x_domain(self) -> tuple[float, float]:
        return (float(self.x.invert(0.0)), float(self.x.invert(self.viewport.width)))

    @property
    def plot_height(self) -> float:
        return self.y.range[1]


def compute_scales(
    series: Series,
    viewport: Viewport,
    transform: ZoomTransform,
    display_mode: DisplayMode,
    axis_height: float,
) -> ChartScales | None:
    if not series:
        return None
    base_x = LinearScale(
        domain=(series[0].timestamp, series[-1].timestamp),
        range=(0.0, float(viewport.width)),
    )
    # Order matters: translate first, then scale, so the pan offset is not multiplied by k.
    zoom = ZoomTransform.identity().translate(transform.x, transform.y).scale(transform.k)
    x_scale = zoom.rescale_x(base_x)

    values = np.asarray([point_value(point, display_mode) for point in series], dtype=np.float64)
    y_scale = LinearScale(
        domain=(0.0, float(np.max(values))),
        range=(0.0, float(viewport.height) - float(axis_height) * 2),
    )
    return ChartScales(x=x_scale, y=y_scale, viewport=viewport)


def nice_step(span: float, target: int) -> float:
    if target <= 0:
        raise ValueError("target must be > 0")
    if not math.isfinite(span) or span <= 0:
        return 1.0
    return _nice_number(span / target)


def _normalize(value, a: float, b: float):
    span = b - a
    if span == 0 or math.isnan(span):
        if isinstance(value, np.ndarray):
            return np.full(value.shape, 0.5, dtype=np.float64)
        return 0.5
    if isinstance(value, np.ndarray):
        return (value.astype(np.float64, copy=False) - a) / span
    return (float(value) - a) / span


def _nice_number(value: float) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)
    if frac < 1.5:
        nice_frac = 1.0
    elif frac < 3.0:
        nice_frac = 2.0
    elif frac < 7.0:
        nice_frac = 5.0
    else:
        nice_frac = 10.0
    return float(nice_frac * (10**exp))
