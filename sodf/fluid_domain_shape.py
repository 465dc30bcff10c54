"""Fluid domain shapes: box, cylinder, cone frustum and spherical segment."""

from __future__ import annotations

import math

import numpy as np

from sodf.domain_shape import DomainShape

_SEGMENT_SEARCH_ITERATIONS = 100
_SEGMENT_VOLUME_TOLERANCE = 1e-09


class FluidBoxShape(DomainShape):
    """Rectangular box filled along its height."""

    def __init__(self, width: float, length: float, height: float) -> None:
        super().__init__(height)
        self.width = float(width)
        self.length = float(length)
        self._max_fill_volume = self.fill_volume(height)

    def fill_height(self, volume: float) -> float:
        if volume <= 0.0 or volume > self.max_fill_volume:
            return 0.0
        return volume / (self.length * self.width)

    def fill_volume(self, height: float) -> float:
        if height <= 0.0 or height > self.max_fill_height:
            return 0.0
        return self.length * self.width * height


class FluidCylinderShape(DomainShape):
    """Upright cylinder filled along its axis."""

    def __init__(self, radius: float, height: float) -> None:
        super().__init__(height)
        self.radius = float(radius)
        self._max_fill_volume = self.fill_volume(height)

    def fill_height(self, volume: float) -> float:
        if volume <= 0.0 or volume > self.max_fill_volume:
            return 0.0
        return volume / (math.pi * self.radius * self.radius)

    def fill_volume(self, height: float) -> float:
        if height <= 0.0 or height > self.max_fill_height:
            return 0.0
        return math.pi * self.radius * self.radius * height


class FluidConeShape(DomainShape):
    """Cone frustum going from ``base_radius`` at the bottom to ``top_radius``."""

    def __init__(self, base_radius: float, top_radius: float, height: float) -> None:
        super().__init__(height)
        self.base_radius = float(base_radius)
        self.top_radius = float(top_radius)
        self._max_fill_volume = self.fill_volume(height)

    def fill_height(self, volume: float) -> float:
        if volume <= 0.0 or volume > self.max_fill_volume:
            return 0.0

        r1 = self.base_radius
        k = (self.top_radius - r1) / self.max_fill_height

        # V(h) = a h^3 + b h^2 + c h
        a = (math.pi / 3.0) * k * k
        b = math.pi * r1 * k
        c = math.pi * r1 * r1
        d = -volume

        roots = np.roots([a, b, c, d])
        positive = sorted(
            float(root.real)
            for root in roots
            if abs(root.imag) <= 1e-9 * max(1.0, abs(root)) and root.real > 0.0
        )
        if not positive:
            return 0.0

        h = positive[0]
        for _ in range(3):
            slope = 3.0 * a * h * h + 2.0 * b * h + c
            if slope == 0.0:
                break
            h -= (((a * h + b) * h + c) * h + d) / slope
        return h

    def fill_volume(self, height: float) -> float:
        if height <= 0.0 or height > self.max_fill_height:
            return 0.0
        r_start = self.base_radius
        r_end = self.base_radius + (self.top_radius - self.base_radius) * (
            height / self.max_fill_height
        )
        return (math.pi * height / 3.0) * (r_start * r_start + r_start * r_end + r_end * r_end)


class FluidSphericalSegmentShape(DomainShape):
    """Slice of a sphere between two parallel planes, filled from the base plane."""

    def __init__(self, base_radius: float, top_radius: float, height: float) -> None:
        super().__init__(height)
        self.base_radius = float(base_radius)
        self.top_radius = float(top_radius)
        if not _is_valid_segment(self.base_radius, self.top_radius, self.max_fill_height):
            raise ValueError(
                "Incompatible spherical segment dimensions: "
                f"base_radius = {base_radius:g}, top_radius = {top_radius:g}, "
                f"height = {height:g}. No valid sphere exists for these values."
            )
        self._max_fill_volume = self.fill_volume(height)

    def _sphere(self) -> tuple[float, float]:
        """Distance from the base plane to the sphere centre, and the sphere radius."""
        a1, a2, h = self.base_radius, self.top_radius, self.max_fill_height
        z0 = (a2 * a2 - a1 * a1 + h * h) / (2 * h)
        return z0, math.sqrt(a1 * a1 + z0 * z0)

    def _segment_volume(self, z0: float, r: float, height: float) -> float:
        a1 = self.base_radius
        ah2 = r * r - (z0 - height) * (z0 - height)
        ah = math.sqrt(ah2) if ah2 > 0 else 0.0
        return math.pi * height / 6.0 * (3 * a1 * a1 + 3 * ah * ah + height * height)

    def fill_height(self, volume: float) -> float:
        if volume <= 0.0 or volume > self.max_fill_volume:
            return 0.0

        z0, r = self._sphere()
        low, high, mid = 0.0, self.max_fill_height, 0.0
        for _ in range(_SEGMENT_SEARCH_ITERATIONS):
            mid = 0.5 * (low + high)
            v = self._segment_volume(z0, r, mid)
            if abs(v - volume) < _SEGMENT_VOLUME_TOLERANCE:
                break
            if v < volume:
                low = mid
            else:
                high = mid
        return mid

    def fill_volume(self, height: float) -> float:
        if height <= 0.0 or height > self.max_fill_height:
            return 0.0
        z0, r = self._sphere()
        return self._segment_volume(z0, r, height)


def _is_valid_segment(base_radius: float, top_radius: float, height: float) -> bool:
    values = (base_radius, top_radius, height)
    return all(math.isfinite(v) for v in values) and base_radius >= 0.0 and top_radius >= 0.0 and height > 0.0


def from_base_sphere_radius(base_radius: float, sphere_radius: float) -> FluidSphericalSegmentShape:
    """Spherical segment with the given base radius cut from a sphere of ``sphere_radius``."""
    if sphere_radius <= base_radius:
        raise ValueError("Sphere radius must be greater than base radius")

    theta = math.asin(base_radius / sphere_radius)
    height = sphere_radius * math.cos(theta)
    top_radius = sphere_radius * math.sin(theta + height / sphere_radius)
    return FluidSphericalSegmentShape(base_radius, top_radius, height)