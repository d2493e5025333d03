[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cpd"
version = "0.1.0"
description = "Coherent Point Drift: rigid, affine and nonrigid point set registration"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "point cloud",
    "registration",
    "coherent point drift",
    "rigid",
    "affine",
    "nonrigid",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cpd = "cpd.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["cpd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
