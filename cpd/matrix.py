"""Matrix helpers: loading point sets, affine application, sigma2 and affinity."""

from __future__ import annotations

import os
import re

import numpy as np

_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _as_matrix(values) -> np.ndarray:
    matrix = np.asarray(values, dtype=float)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    return matrix


def apply_transformation_matrix(points, transform) -> np.ndarray:
    """Apply a homogeneous transformation matrix to a set of points.

    The transformation matrix must be one column wider than the points.
    """
    points = _as_matrix(points)
    transform = np.asarray(transform, dtype=float)
    homogeneous = np.hstack([points, np.ones((points.shape[0], 1))])
    transformed = homogeneous @ transform.T
    return transformed[:, : points.shape[1]]


def _parse_row(line: str) -> list[float]:
    row: list[float] = []
    pos = 0
    while (match := _NUMBER.match(line, pos)) is not None:
        row.append(float(match.group(1)))
        pos = match.end()
        if line.startswith(",", pos):
            pos += 1
    return row


def matrix_from_path(path: str | os.PathLike) -> np.ndarray:
    """Load a matrix from a comma or whitespace delimited text file."""
    try:
        handle = open(path, encoding="utf-8")
    except OSError as err:
        raise OSError(f"Unable to open file for reading: {os.fspath(path)}") from err
    rows: list[list[float]] = []
    with handle:
        for line in handle:
            row = _parse_row(line.rstrip("\n"))
            if rows and len(rows[-1]) != len(row):
                raise ValueError(
                    f"Irregular number of rows: {len(rows[-1])}, {len(row)}"
                )
            rows.append(row)
    if not rows:
        return np.zeros((0, 0))
    return np.array(rows, dtype=float).reshape(len(rows), len(rows[0]))


def default_sigma2(fixed, moving) -> float:
    """Compute the default starting sigma2 for two point sets."""
    fixed = _as_matrix(fixed)
    moving = _as_matrix(moving)
    n_fixed, dims = fixed.shape
    n_moving = moving.shape[0]
    numerator = (
        n_moving * float(np.sum(fixed**2))
        + n_fixed * float(np.sum(moving**2))
        - 2.0 * float(fixed.sum(axis=0) @ moving.sum(axis=0))
    )
    return numerator / (n_fixed * n_moving * dims)


def affinity(x, y, beta: float) -> np.ndarray:
    """Compute the Gaussian affinity matrix between the rows of x and y."""
    x = _as_matrix(x)
    y = _as_matrix(y)
    k = -2.0 * beta * beta
    try:
        g = np.empty((x.shape[0], y.shape[0]))
    except MemoryError as err:
        raise MemoryError(
            f"Unable to allocate {x.shape[0]} by {y.shape[0]} affinity matrix, "
            "try again with fewer points"
        ) from err
    for column, point in enumerate(y):
        g[:, column] = np.exp(np.sum((x - point) ** 2, axis=1) / k)
    return g