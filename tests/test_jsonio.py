import json
from datetime import timedelta

import numpy as np

from cpd.affine import AffineResult
from cpd.jsonio import matrix_to_json, to_json
from cpd.nonrigid import NonrigidResult
from cpd.rigid import RigidResult


def test_rigid_result_converts_to_json():
    result = RigidResult(points=np.zeros((0, 2)), sigma2=0.0)
    root = to_json(result)
    assert set(root) == {
        "sigma2",
        "runtime",
        "iterations",
        "rotation",
        "translation",
        "scale",
    }
    assert root["rotation"] is None
    assert root["scale"] == 1.0
    assert json.loads(json.dumps(root)) == root


def test_rigid_result_fields():
    result = RigidResult(
        points=np.zeros((1, 2)),
        sigma2=0.5,
        rotation=np.array([[0.0, -1.0], [1.0, 0.0]]),
        translation=np.array([1.0, 2.0]),
        scale=2.0,
        runtime=timedelta(microseconds=1_500_000),
        iterations=7,
    )
    root = to_json(result)
    assert root["sigma2"] == 0.5
    assert root["runtime"] == 1.5
    assert root["iterations"] == 7
    assert root["rotation"] == [[0.0, -1.0], [1.0, 0.0]]
    assert root["translation"] == [[1.0], [2.0]]
    assert root["scale"] == 2.0


def test_affine_result_fields():
    result = AffineResult(
        points=np.zeros((1, 2)),
        sigma2=0.25,
        transform=np.array([[1.0, 2.0], [3.0, 4.0]]),
        translation=np.array([5.0, 6.0]),
    )
    root = to_json(result)
    assert root["transform"] == [[1.0, 2.0], [3.0, 4.0]]
    assert root["translation"] == [[5.0], [6.0]]
    assert "scale" not in root


def test_nonrigid_result_has_base_fields_only():
    result = NonrigidResult(points=np.zeros((2, 2)), sigma2=0.1, iterations=3)
    assert to_json(result) == {"sigma2": 0.1, "runtime": 0.0, "iterations": 3}


def test_matrix_to_json():
    assert matrix_to_json([[1, 2], [3, 4]]) == [[1.0, 2.0], [3.0, 4.0]]
    assert matrix_to_json(np.array([7.0, 8.0])) == [[7.0], [8.0]]
    assert matrix_to_json(np.zeros((0, 3))) is None