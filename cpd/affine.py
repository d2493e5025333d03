"""Affine coherent point drift: translation, rotation, skew and scaling."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from cpd.gauss_transform import Probabilities
from cpd.normalization import Normalization
from cpd.transform import DEFAULT_LINKED, Result, Transform


@dataclass(eq=False)
class AffineResult(Result):
    """The result of an affine registration."""

    transform: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def matrix(self) -> np.ndarray:
        """Return the transform and translation as one homogeneous matrix."""
        rows, cols = self.transform.shape
        matrix = np.zeros((rows + 1, cols + 1))
        matrix[:rows, :cols] = self.transform
        matrix[:rows, -1] = self.translation
        matrix[-1, -1] = 1.0
        return matrix

    def denormalize(self, normalization: Normalization) -> None:
        super().denormalize(normalization)
        self.translation = (
            normalization.fixed_scale * self.translation
            + normalization.fixed_mean
            - self.transform @ normalization.moving_mean
        )
        self.transform = (
            self.transform * normalization.fixed_scale / normalization.moving_scale
        )


class Affine(Transform):
    """Affine coherent point drift."""

    def __init__(self, linked: bool = DEFAULT_LINKED, **kwargs) -> None:
        super().__init__(**kwargs)
        self.linked = linked

    def compute_one(
        self, fixed, moving, probabilities: Probabilities, sigma2: float
    ) -> AffineResult:
        fixed = np.asarray(fixed, dtype=float)
        moving = np.asarray(moving, dtype=float)
        cols = fixed.shape[1]
        p1 = probabilities.p1
        pt1 = probabilities.pt1
        np_ = float(p1.sum())
        mu_x = fixed.T @ pt1 / np_
        mu_y = moving.T @ p1 / np_
        b1 = probabilities.px.T @ moving - np_ * np.outer(mu_x, mu_y)
        b2 = (moving * p1[:, None]).T @ moving - np_ * np.outer(mu_y, mu_y)
        transform = b1 @ np.linalg.inv(b2)
        translation = mu_x - transform @ mu_y
        # The diagonal sum of b1 @ transform.T is the elementwise product sum.
        b1_dot_transform = float(np.sum(b1 * transform))
        new_sigma2 = abs(
            float(np.sum(fixed**2 * pt1[:, None]))
            - np_ * float(mu_x @ mu_x)
            - b1_dot_transform
        ) / (np_ * cols)
        points = moving @ transform.T + translation
        return AffineResult(
            points=points,
            sigma2=new_sigma2,
            transform=transform,
            translation=translation,
        )

    def is_linked(self) -> bool:
        return self.linked


def affine(fixed, moving) -> AffineResult:
    """Run an affine registration with default settings."""
    return Affine().run(fixed, moving)