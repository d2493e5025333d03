"""Rigid coherent point drift: rotation, translation and optional scaling."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from cpd.gauss_transform import Probabilities
from cpd.normalization import Normalization
from cpd.transform import DEFAULT_LINKED, Result, Transform

DEFAULT_REFLECTIONS = False
DEFAULT_SCALE = not DEFAULT_LINKED


@dataclass(eq=False)
class RigidResult(Result):
    """The result of a rigid registration."""

    rotation: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(0))
    scale: float = 1.0

    def matrix(self) -> np.ndarray:
        """Return scale, rotation and translation as one homogeneous matrix."""
        dims = self.rotation.shape[0]
        matrix = np.zeros((dims + 1, self.rotation.shape[1] + 1))
        matrix[:dims, :-1] = self.rotation * self.scale
        matrix[:dims, -1] = self.translation
        matrix[-1, -1] = 1.0
        return matrix

    def denormalize(self, normalization: Normalization) -> None:
        super().denormalize(normalization)
        self.scale = self.scale * normalization.fixed_scale / normalization.moving_scale
        self.translation = (
            normalization.fixed_scale * self.translation
            + normalization.fixed_mean
            - self.scale * self.rotation @ normalization.moving_mean
        )


class Rigid(Transform):
    """Rigid coherent point drift, with optional scaling and reflections."""

    def __init__(
        self,
        reflections: bool = DEFAULT_REFLECTIONS,
        scale: bool = DEFAULT_SCALE,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.reflections = reflections
        self.scale = scale

    def compute_one(
        self, fixed, moving, probabilities: Probabilities, sigma2: float
    ) -> RigidResult:
        fixed = np.asarray(fixed, dtype=float)
        moving = np.asarray(moving, dtype=float)
        cols = fixed.shape[1]
        p1 = probabilities.p1
        pt1 = probabilities.pt1
        np_ = float(pt1.sum())
        mu_x = fixed.T @ pt1 / np_
        mu_y = moving.T @ p1 / np_
        a = probabilities.px.T @ moving - np_ * np.outer(mu_x, mu_y)
        u, singular, vt = np.linalg.svd(a, full_matrices=False)
        c = np.ones(cols)
        if not self.reflections:
            c[-1] = np.linalg.det(u @ vt)
        rotation = u @ np.diag(c) @ vt
        trace_sc = float(np.sum(singular * c))
        fixed_weighted = float(np.sum(fixed**2 * pt1[:, None]))
        moving_weighted = float(np.sum(moving**2 * p1[:, None]))
        if self.scale:
            scale = trace_sc / (moving_weighted - np_ * float(mu_y @ mu_y))
            new_sigma2 = abs(
                fixed_weighted - np_ * float(mu_x @ mu_x) - scale * trace_sc
            ) / (np_ * cols)
        else:
            scale = 1.0
            new_sigma2 = abs(
                fixed_weighted
                + moving_weighted
                - np_ * float(mu_x @ mu_x)
                - np_ * float(mu_y @ mu_y)
                - 2 * trace_sc
            ) / (np_ * cols)
        translation = mu_x - scale * rotation @ mu_y
        points = scale * moving @ rotation.T + translation
        return RigidResult(
            points=points,
            sigma2=new_sigma2,
            rotation=rotation,
            translation=translation,
            scale=scale,
        )

    def is_linked(self) -> bool:
        return not self.scale


def rigid(fixed, moving) -> RigidResult:
    """Run a rigid registration with default settings."""
    return Rigid().run(fixed, moving)