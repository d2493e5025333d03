"""Correspondence probabilities between two point sets via the Gauss transform."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import numpy as np


@dataclass(eq=False)
class Probabilities:
    """Probability terms produced by comparing two point sets."""

    p1: np.ndarray
    pt1: np.ndarray
    px: np.ndarray
    l: float
    correspondence: np.ndarray = field(
        default_factory=lambda: np.zeros(0, dtype=np.intp)
    )


class GaussTransform(ABC):
    """Base class for Gauss transforms."""

    @abstractmethod
    def compute(self, fixed, moving, sigma2: float, outliers: float) -> Probabilities:
        """Compute the probabilities for the given point sets."""


class GaussTransformDirect(GaussTransform):
    """The direct (exact) Gauss transform."""

    def compute(self, fixed, moving, sigma2: float, outliers: float) -> Probabilities:
        fixed = np.asarray(fixed, dtype=float)
        moving = np.asarray(moving, dtype=float)
        n_fixed, dims = fixed.shape
        n_moving = moving.shape[0]
        ksig = -2.0 * sigma2
        outlier_tmp = (outliers * n_moving * (-ksig * math.pi) ** (0.5 * dims)) / (
            (1 - outliers) * n_fixed
        )
        p1 = np.zeros(n_moving)
        p1_max = np.zeros(n_moving)
        pt1 = np.zeros(n_fixed)
        px = np.zeros((n_moving, dims))
        correspondence = np.zeros(n_moving, dtype=np.intp)
        l = 0.0

        for i, point in enumerate(fixed):
            p = np.exp(np.sum((point - moving) ** 2, axis=1) / ksig)
            sp = float(p.sum()) + outlier_tmp
            pt1[i] = 1 - outlier_tmp / sp
            ratio = p / sp
            p1 += ratio
            px += np.outer(ratio, point)
            better = ratio > p1_max
            correspondence[better] = i
            p1_max[better] = ratio[better]
            l -= math.log(sp)

        l += dims * n_fixed * math.log(sigma2) / 2
        return Probabilities(p1, pt1, px, l, correspondence)


def make_default() -> GaussTransform:
    """Return the default Gauss transform."""
    return GaussTransformDirect()