"""JSON-ready summaries of registration results."""

from __future__ import annotations

import numpy as np

from cpd.affine import AffineResult
from cpd.rigid import RigidResult
from cpd.transform import Result


def matrix_to_json(matrix) -> list[list[float]] | None:
    """Return a matrix as a list of rows; vectors become a single column.

    An empty matrix yields None.
    """
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    if matrix.shape[0] == 0:
        return None
    return matrix.tolist()


def _base_json(result: Result) -> dict:
    return {
        "sigma2": float(result.sigma2),
        "runtime": result.runtime.total_seconds(),
        "iterations": int(result.iterations),
    }


def to_json(result: Result) -> dict:
    """Summarize a result as a JSON-serializable dictionary."""
    root = _base_json(result)
    if isinstance(result, RigidResult):
        root["rotation"] = matrix_to_json(result.rotation)
        root["translation"] = matrix_to_json(result.translation)
        root["scale"] = float(result.scale)
    elif isinstance(result, AffineResult):
        root["transform"] = matrix_to_json(result.transform)
        root["translation"] = matrix_to_json(result.translation)
    return root