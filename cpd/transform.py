"""Generic coherent point drift registration loop and its result type."""

from __future__ import annotations

import math
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

import numpy as np

from cpd.gauss_transform import (
    GaussTransform,
    GaussTransformDirect,
    Probabilities,
    make_default,
)
from cpd.matrix import default_sigma2
from cpd.normalization import Normalization

DEFAULT_MAX_ITERATIONS = 150
DEFAULT_NORMALIZE = True
DEFAULT_OUTLIERS = 0.1
DEFAULT_TOLERANCE = 1e-5
DEFAULT_SIGMA2 = 0.0
DEFAULT_CORRESPONDENCE = False
DEFAULT_LINKED = True

_SIGMA2_FLOOR = 10 * float(np.finfo(float).eps)


@dataclass(eq=False)
class Result:
    """The outcome of a registration run."""

    points: np.ndarray
    sigma2: float
    correspondence: np.ndarray = field(
        default_factory=lambda: np.zeros(0, dtype=np.intp)
    )
    runtime: timedelta = field(default_factory=timedelta)
    iterations: int = 0

    def denormalize(self, normalization: Normalization) -> None:
        """Scale and shift the points back into the fixed set's frame."""
        self.points = self.points * normalization.fixed_scale + normalization.fixed_mean


def _relative_change(new: float, old: float) -> float:
    if new == 0.0:
        return math.nan if new == old else math.inf
    return abs((new - old) / new)


class Transform(ABC):
    """Base class for coherent point drift registrations.

    Subclasses supply one iteration of the update (``compute_one``) and say
    whether the two point sets share one normalization scale (``is_linked``).
    """

    def __init__(
        self,
        correspondence: bool = DEFAULT_CORRESPONDENCE,
        gauss_transform: GaussTransform | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        normalize: bool = DEFAULT_NORMALIZE,
        outliers: float = DEFAULT_OUTLIERS,
        sigma2: float = DEFAULT_SIGMA2,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> None:
        self.correspondence = correspondence
        self.gauss_transform = (
            gauss_transform if gauss_transform is not None else make_default()
        )
        self.max_iterations = int(max_iterations)
        self.normalize = normalize
        self.outliers = outliers
        self.sigma2 = sigma2
        self.tolerance = tolerance
        self.callbacks: list[Callable[[Result], None]] = []

    def add_callback(self, callback: Callable[[Result], None]) -> Transform:
        """Register a function called with the result of every iteration."""
        self.callbacks.append(callback)
        return self

    def run(self, fixed, moving) -> Result:
        """Register the moving points onto the fixed points."""
        tic = time.perf_counter()
        fixed = np.asarray(fixed, dtype=float)
        moving = np.asarray(moving, dtype=float)
        normalization = Normalization(fixed, moving, self.is_linked())
        if self.normalize:
            fixed = normalization.fixed
            moving = normalization.moving

        self.init(fixed, moving)

        if self.sigma2 == 0.0:
            sigma2 = default_sigma2(fixed, moving)
        elif self.normalize:
            sigma2 = self.sigma2 / normalization.fixed_scale
        else:
            sigma2 = self.sigma2
        result = Result(points=moving, sigma2=sigma2)

        iterations = 0
        ntol = self.tolerance + 10.0
        l = 0.0
        while (
            iterations < self.max_iterations
            and ntol > self.tolerance
            and result.sigma2 > _SIGMA2_FLOOR
        ):
            probabilities = self.gauss_transform.compute(
                fixed, result.points, result.sigma2, self.outliers
            )
            self.modify_probabilities(probabilities)
            ntol = _relative_change(probabilities.l, l)
            l = probabilities.l
            result = self.compute_one(fixed, moving, probabilities, result.sigma2)
            for callback in self.callbacks:
                callback(result)
            iterations += 1

        if self.normalize:
            result.denormalize(normalization)
        if self.correspondence:
            probabilities = GaussTransformDirect().compute(
                fixed, result.points, result.sigma2, self.outliers
            )
            result.correspondence = probabilities.correspondence
        result.runtime = timedelta(seconds=time.perf_counter() - tic)
        result.iterations = iterations
        return result

    def init(self, fixed, moving) -> None:
        """Prepare for a run; called after normalization. Does nothing by default."""

    def modify_probabilities(self, probabilities: Probabilities) -> None:
        """Adjust the probabilities of an iteration. Does nothing by default."""

    @abstractmethod
    def compute_one(
        self, fixed, moving, probabilities: Probabilities, sigma2: float
    ) -> Result:
        """Compute one iteration of the registration."""

    @abstractmethod
    def is_linked(self) -> bool:
        """Whether both point sets are normalized with the same scale."""