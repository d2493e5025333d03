"""Nonrigid coherent point drift."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from cpd.gauss_transform import Probabilities
from cpd.matrix import affinity
from cpd.transform import DEFAULT_LINKED, Result, Transform

DEFAULT_BETA = 3.0
DEFAULT_LAMBDA = 3.0


@dataclass(eq=False)
class NonrigidResult(Result):
    """The result of a nonrigid registration."""


def _solve(lhs: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    try:
        return np.linalg.solve(lhs, rhs)
    except np.linalg.LinAlgError:
        return np.linalg.lstsq(lhs, rhs, rcond=None)[0]


class Nonrigid(Transform):
    """Nonrigid coherent point drift with Gaussian-kernel regularization."""

    def __init__(
        self,
        beta: float = DEFAULT_BETA,
        lambda_: float = DEFAULT_LAMBDA,
        linked: bool = DEFAULT_LINKED,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.beta = beta
        self.lambda_ = lambda_
        self.linked = linked
        self._g: np.ndarray | None = None
        self._w: np.ndarray | None = None

    def init(self, fixed, moving) -> None:
        moving = np.asarray(moving, dtype=float)
        self._g = affinity(moving, moving, self.beta)
        self._w = np.zeros(moving.shape)

    def _require_init(self) -> tuple[np.ndarray, np.ndarray]:
        if self._g is None or self._w is None:
            raise RuntimeError("Nonrigid transform used before init()")
        return self._g, self._w

    def modify_probabilities(self, probabilities: Probabilities) -> None:
        g, w = self._require_init()
        # Diagonal sum of w.T @ g @ w, written as an elementwise product sum.
        regularization = float(np.sum(w * (g @ w)))
        probabilities.l += self.lambda_ / 2.0 * regularization

    def compute_one(
        self, fixed, moving, probabilities: Probabilities, sigma2: float
    ) -> NonrigidResult:
        g, _ = self._require_init()
        fixed = np.asarray(fixed, dtype=float)
        moving = np.asarray(moving, dtype=float)
        cols = fixed.shape[1]
        p1 = probabilities.p1
        pt1 = probabilities.pt1
        lhs = p1[:, None] * g + self.lambda_ * sigma2 * np.eye(moving.shape[0])
        rhs = probabilities.px - p1[:, None] * moving
        w = _solve(lhs, rhs)
        points = moving + g @ w
        np_ = float(p1.sum())
        new_sigma2 = abs(
            (
                float(np.sum(fixed**2 * pt1[:, None]))
                + float(np.sum(points**2 * p1[:, None]))
                - 2.0 * float(np.sum(probabilities.px * points))
            )
            / (np_ * cols)
        )
        return NonrigidResult(points=points, sigma2=new_sigma2)

    def is_linked(self) -> bool:
        return self.linked


def nonrigid(fixed, moving) -> NonrigidResult:
    """Run a nonrigid registration with default settings."""
    return Nonrigid().run(fixed, moving)