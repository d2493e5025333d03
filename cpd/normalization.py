"""Scale and offset point sets to a zero-centred, roughly unit shape."""

from __future__ import annotations

import numpy as np


class Normalization:
    """Normalized copies of two point sets, with the means and scales used.

    With ``linked`` true both sets share the larger of their two scales,
    which suits data that should not be rescaled; otherwise each set is
    scaled on its own.
    """

    def __init__(self, fixed, moving, linked: bool = True) -> None:
        fixed = np.asarray(fixed, dtype=float)
        moving = np.asarray(moving, dtype=float)
        self.fixed_mean: np.ndarray = fixed.mean(axis=0)
        self.fixed: np.ndarray = fixed - self.fixed_mean
        self.fixed_scale: float = float(
            np.sqrt(np.sum(self.fixed**2) / self.fixed.shape[0])
        )
        self.moving_mean: np.ndarray = moving.mean(axis=0)
        self.moving: np.ndarray = moving - self.moving_mean
        self.moving_scale: float = float(
            np.sqrt(np.sum(self.moving**2) / self.moving.shape[0])
        )
        if linked:
            scale = max(self.fixed_scale, self.moving_scale)
            self.fixed_scale = scale
            self.moving_scale = scale
        self.fixed = self.fixed / self.fixed_scale
        self.moving = self.moving / self.moving_scale