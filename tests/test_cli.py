import json

import numpy as np
import pytest

from cpd.cli import main
from cpd.matrix import apply_transformation_matrix, matrix_from_path


@pytest.fixture
def spiral():
    t = np.linspace(0.0, 4.0 * np.pi, 60)
    r = 0.2 + t / (4.0 * np.pi)
    return np.column_stack([r * np.cos(t), r * np.sin(t)])


@pytest.fixture
def point_files(tmp_path, spiral):
    angle = np.deg2rad(20.0)
    rotation = np.array(
        [[np.cos(angle), -np.sin(angle)], [np.sin(angle), np.cos(angle)]]
    )
    moving = spiral @ rotation + np.array([0.5, -0.25])
    fixed_path = tmp_path / "fixed.csv"
    moving_path = tmp_path / "moving.csv"
    np.savetxt(fixed_path, spiral, delimiter=",")
    np.savetxt(moving_path, moving, delimiter=",")
    return spiral, moving, str(fixed_path), str(moving_path)


def _parse_matrix(text):
    return np.array(
        [[float(value) for value in line.split()] for line in text.strip().splitlines()]
    )


def test_rigid_prints_json_and_writes_points(tmp_path, point_files, capsys):
    fixed, _, fixed_path, moving_path = point_files
    outfile = tmp_path / "out.txt"
    assert main(["rigid", fixed_path, moving_path, str(outfile)]) == 0
    root = json.loads(capsys.readouterr().out)
    assert {"sigma2", "runtime", "iterations", "rotation", "translation", "scale"} <= set(
        root
    )
    assert root["scale"] == pytest.approx(1.0, abs=1e-3)
    assert len(root["rotation"]) == 2
    written = matrix_from_path(outfile)
    assert written.shape == fixed.shape
    np.testing.assert_allclose(written, fixed, atol=1e-3)


def test_transform_rigid_prints_matrix(point_files, capsys):
    fixed, moving, fixed_path, moving_path = point_files
    assert main(["transform", "rigid", fixed_path, moving_path]) == 0
    transform = _parse_matrix(capsys.readouterr().out)
    assert transform.shape == (3, 3)
    np.testing.assert_allclose(transform[2], [0.0, 0.0, 1.0])
    np.testing.assert_allclose(
        apply_transformation_matrix(moving, transform), fixed, atol=1e-3
    )


def test_transform_affine_prints_matrix(point_files, capsys):
    fixed, moving, fixed_path, moving_path = point_files
    assert main(["transform", "affine", fixed_path, moving_path]) == 0
    transform = _parse_matrix(capsys.readouterr().out)
    assert transform.shape == (3, 3)
    np.testing.assert_allclose(
        apply_transformation_matrix(moving, transform), fixed, atol=1e-3
    )


def test_transform_apply_writes_points(tmp_path, spiral):
    transform = np.array([[2.0, 0.0, 1.0], [0.0, 3.0, -1.0], [0.0, 0.0, 1.0]])
    transform_path = tmp_path / "transform.csv"
    points_path = tmp_path / "points.csv"
    outfile = tmp_path / "applied.txt"
    np.savetxt(transform_path, transform, delimiter=",")
    np.savetxt(points_path, spiral, delimiter=",")
    status = main(
        ["transform", "apply", str(transform_path), str(points_path), str(outfile)]
    )
    assert status == 0
    np.testing.assert_allclose(
        matrix_from_path(outfile),
        apply_transformation_matrix(spiral, transform),
        rtol=1e-4,
        atol=1e-5,
    )


def test_transform_invalid_method(point_files, capsys):
    _, _, fixed_path, moving_path = point_files
    assert main(["transform", "bogus", fixed_path, moving_path]) == 1
    assert "invalid method 'bogus'" in capsys.readouterr().err


def test_missing_file_reports_error(tmp_path, capsys):
    missing = str(tmp_path / "missing.csv")
    assert main(["rigid", missing, missing]) == 1
    assert "Unable to open file for reading" in capsys.readouterr().err


@pytest.mark.parametrize("method", ["rigid", "nonrigid"])
def test_random_completes(method, capsys):
    assert main(["random", method, "12", "2", "--seed", "1"]) == 0
    assert capsys.readouterr().out.strip().endswith("Registration completed OK")


def test_random_callback_prints_points(capsys):
    assert main(["random", "rigid", "5", "2", "--seed", "2", "--callback"]) == 0
    out = capsys.readouterr().out
    blocks = [block for block in out.split("\n\n") if block.strip()]
    assert len(blocks) >= 2
    assert _parse_matrix(blocks[0]).shape == (5, 2)


def test_random_invalid_method(capsys):
    assert main(["random", "bogus", "5", "2"]) == 1
    assert "Invalid method: bogus" in capsys.readouterr().out