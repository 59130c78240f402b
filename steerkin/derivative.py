"""Numerical derivatives of sampled data at unequally spaced points."""

from __future__ import annotations

from typing import List, Optional, Sequence


def derivative(x: Sequence[float], y: Sequence[float], xest: Optional[float] = None) -> float:
    """Derivative of ``y`` with respect to ``x``, evaluated at ``xest``.

    With two samples the slope of the secant through the first and last
    points is returned. With three or more, a quadratic through the last
    three points of each sequence is differentiated. Fewer than two samples
    give zero. ``xest`` defaults to the last ``x`` value.
    """
    nx = len(x)
    ny = len(y)
    if nx < 2 or ny < 2:
        return 0.0
    if nx == 2 or ny == 2:
        return (y[-1] - y[0]) / (x[-1] - x[0])

    if xest is None:
        xest = x[-1]
    x0, x1, x2 = x[-3], x[-2], x[-1]
    y0, y1, y2 = y[-3], y[-2], y[-1]

    return (
        y0 * (2.0 * xest - x1 - x2) / ((x0 - x1) * (x0 - x2))
        + y1 * (2.0 * xest - x0 - x2) / ((x1 - x0) * (x1 - x2))
        + y2 * (2.0 * xest - x0 - x1) / ((x2 - x0) * (x2 - x1))
    )


def derivative_vector(t: Sequence[float], v: Sequence[Sequence[float]]) -> List[float]:
    """Derivative of a history of vectors ``v`` sampled at times ``t``.

    Each dimension is differentiated separately over the last three samples
    and evaluated at the last time in ``t``.
    """
    n = min(len(t), len(v))
    dimensions = len(v[0])
    if n < 2:
        return [0.0] * dimensions
    if n == 2:
        span = t[1] - t[0]
        return [(b - a) / span for a, b in zip(v[0], v[1])]

    recent = v[n - 3 : n]
    return [derivative(t, [sample[i] for sample in recent]) for i in range(dimensions)]