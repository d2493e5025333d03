# cpd

Coherent Point Drift (CPD) point set registration for NumPy arrays.

Given a *fixed* point set and a *moving* point set (each an `N x D` array of
points), CPD finds the transformation that best moves the moving points onto
the fixed ones. Three kinds of transformation are available:

- **rigid** (`cpd.rigid`): rotation, translation and optionally a uniform scale
- **affine** (`cpd.affine`): a general linear transform plus translation
- **nonrigid** (`cpd.nonrigid`): a smooth displacement field regularised with a
  Gaussian kernel

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Library usage

The one-call helpers run a registration with default settings:

```python
import numpy as np
from cpd.rigid import rigid
from cpd.affine import affine
from cpd.nonrigid import nonrigid

fixed = np.loadtxt("fixed.csv", delimiter=",")
moving = np.loadtxt("moving.csv", delimiter=",")

result = rigid(fixed, moving)
print(result.rotation, result.translation, result.scale)
print(result.points)        # the moving points after registration
```

For more control, build a registration object and call `run`. The classes
`Rigid`, `Affine` and `Nonrigid` all accept the common keyword arguments
`correspondence`, `gauss_transform`, `max_iterations` (default 150),
`normalize` (default `True`), `outliers` (default 0.1), `sigma2` (default 0.0,
meaning "compute a starting value") and `tolerance` (default 1e-5):

```python
from cpd.rigid import Rigid

registration = Rigid(scale=True, max_iterations=100, correspondence=True)
registration.add_callback(lambda step: print(step.sigma2))
result = registration.run(fixed, moving)

print(result.iterations, result.sigma2, result.runtime)
print(result.correspondence)  # for each moving point, the most probable fixed point
```

Each class also has its own options:

- `Rigid(reflections=False, scale=False)`: scaling is off by default; when it
  is off, both point sets are normalized with one shared scale.
- `Affine(linked=True)`: whether both point sets share one normalization scale.
- `Nonrigid(beta=3.0, lambda_=3.0, linked=True)`: kernel width, regularization
  weight and shared normalization scale.

Callbacks added with `add_callback` receive the result of every iteration.

Rigid and affine results can be turned into a single homogeneous
transformation matrix and applied to other points:

```python
from cpd.matrix import apply_transformation_matrix

transform = result.matrix()              # (D + 1) x (D + 1)
moved = apply_transformation_matrix(moving, transform)
```

Other pieces:

- `cpd.matrix.matrix_from_path(path)` reads a comma- or whitespace-delimited
  text file into an array, raising `ValueError` if rows differ in length.
- `cpd.matrix.default_sigma2(fixed, moving)` and
  `cpd.matrix.affinity(x, y, beta)` expose building blocks of the algorithms.
- `cpd.normalization.Normalization(fixed, moving, linked)` centres and scales
  two point sets and keeps the means and scales it used.
- `cpd.gauss_transform.GaussTransformDirect` computes the correspondence
  probabilities (`Probabilities`) used in each iteration;
  `cpd.gauss_transform.make_default()` returns it.
- `cpd.jsonio.to_json(result)` summarises a result as a JSON-ready dictionary
  (`sigma2`, `runtime` in seconds, `iterations`, plus the rotation, translation
  and scale of a rigid result or the transform and translation of an affine
  one); `cpd.jsonio.matrix_to_json(matrix)` gives a matrix as a list of rows.

## Command line

Installing the package provides a `cpd` command:

```
cpd rigid FIXED MOVING [OUTFILE]
```

Runs a rigid registration with scaling, prints the result summary as JSON and,
if `OUTFILE` is given, writes the registered points to it.

```
cpd transform rigid FIXED MOVING
cpd transform affine FIXED MOVING
cpd transform apply TRANSFORM POINTS OUTFILE
```

Prints the homogeneous transformation matrix of a rigid (with scaling) or
affine registration, or applies a transformation matrix from a file to a point
file and writes the moved points to `OUTFILE`.

```
cpd random {rigid,nonrigid} ROWS COLS [--callback] [--seed SEED]
```

Registers two random point sets of the given size; `--callback` prints the
points after every iteration.

Input files are read with `matrix_from_path`. Errors are reported on standard
error with exit status 1. See `cpd --help` for details.

## Limitations

Only the direct Gauss transform is provided: each iteration compares every
fixed point with every moving point, and the nonrigid registration builds a
full `N x N` affinity matrix, so time and memory grow quadratically with the
number of points. There is no fast approximate Gauss transform.