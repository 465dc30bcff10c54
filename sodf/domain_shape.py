"""Fillable domain shapes and queries over stacks of them.

A stack is an ordered sequence of domain shapes, the first one at the bottom.
Fill queries on a stack fill each shape completely before moving to the next.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence

DEFAULT_TOLERANCE = 1e-9


class DomainShape(abc.ABC):
    """A shape that can be filled up to a height, holding a volume."""

    def __init__(self, max_fill_height: float) -> None:
        self._max_fill_height = float(max_fill_height)
        self._max_fill_volume = 0.0

    @property
    def max_fill_height(self) -> float:
        return self._max_fill_height

    @property
    def max_fill_volume(self) -> float:
        return self._max_fill_volume

    @abc.abstractmethod
    def fill_height(self, volume: float) -> float:
        """Height reached by ``volume``; 0.0 when the volume is out of range."""

    @abc.abstractmethod
    def fill_volume(self, height: float) -> float:
        """Volume held up to ``height``; 0.0 when the height is out of range."""


def stacked_max_fill_height(shapes: Sequence[DomainShape]) -> float:
    """Total height of the stack."""
    return sum((shape.max_fill_height for shape in shapes), 0.0)


def stacked_max_fill_volume(shapes: Sequence[DomainShape]) -> float:
    """Total volume of the stack."""
    return sum((shape.max_fill_volume for shape in shapes), 0.0)


def stacked_fill_height(
    shapes: Sequence[DomainShape], volume: float, tolerance: float = DEFAULT_TOLERANCE
) -> float:
    """Height reached when ``volume`` is poured into the stack.

    Returns 0.0 for an empty stack, a non-positive volume, a degenerate shape,
    or a volume exceeding the stack by more than ``tolerance``.
    """
    height = 0.0
    if not shapes or volume <= 0.0:
        return height

    for shape in shapes:
        if shape.max_fill_volume == 0.0:
            return 0.0
        if volume >= shape.max_fill_volume:
            height += shape.max_fill_height
            volume = volume - shape.max_fill_volume
        else:
            shape_height = shape.fill_height(volume)
            if shape_height == 0.0:
                return 0.0
            height += shape_height
            volume = 0.0
            break

    if abs(volume) > tolerance:
        return 0.0
    return height


def stacked_fill_volume(
    shapes: Sequence[DomainShape], height: float, tolerance: float = DEFAULT_TOLERANCE
) -> float:
    """Volume held when the stack is filled up to ``height``.

    Returns 0.0 for an empty stack, a non-positive height, a degenerate shape,
    or a height exceeding the stack by more than ``tolerance``.
    """
    volume = 0.0
    if not shapes or height <= 0.0:
        return volume

    for shape in shapes:
        if shape.max_fill_height == 0.0:
            return 0.0
        if height >= shape.max_fill_height:
            volume += shape.max_fill_volume
            height = height - shape.max_fill_height
        else:
            shape_volume = shape.fill_volume(height)
            if shape_volume == 0.0:
                return 0.0
            volume += shape_volume
            height = 0.0
            break

    if abs(height) > tolerance:
        return 0.0
    return volume