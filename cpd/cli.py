"""Command-line entry point for running registrations on point files."""

from __future__ import annotations

import argparse
import json
import sys

import numpy as np

from cpd.affine import affine
from cpd.matrix import apply_transformation_matrix, matrix_from_path
from cpd.jsonio import to_json
from cpd.nonrigid import Nonrigid
from cpd.rigid import Rigid
from cpd.transform import Result


def _format_matrix(matrix) -> str:
    matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
    cells = [[f"{value:g}" for value in row] for row in matrix]
    width = max((len(cell) for row in cells for cell in row), default=0)
    return "\n".join(" ".join(cell.rjust(width) for cell in row) for row in cells)


def _write_matrix(path: str, matrix) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(_format_matrix(matrix) + "\n")


def _print_points(result: Result) -> None:
    print(_format_matrix(result.points))
    print()


def _run_rigid(args: argparse.Namespace) -> int:
    fixed = matrix_from_path(args.fixed)
    moving = matrix_from_path(args.moving)
    result = Rigid(scale=True).run(fixed, moving)
    print(json.dumps(to_json(result), indent=3))
    if args.outfile is not None:
        _write_matrix(args.outfile, result.points)
    return 0


def _run_transform(args: argparse.Namespace) -> int:
    if args.method == "rigid":
        result = Rigid(scale=True).run(
            matrix_from_path(args.first), matrix_from_path(args.second)
        )
        print(_format_matrix(result.matrix()))
    elif args.method == "affine":
        result = affine(matrix_from_path(args.first), matrix_from_path(args.second))
        print(_format_matrix(result.matrix()))
    elif args.method == "apply":
        if args.outfile is None:
            print("ERROR: invalid usage", file=sys.stderr)
            return 1
        transform = matrix_from_path(args.first)
        points = matrix_from_path(args.second)
        _write_matrix(args.outfile, apply_transformation_matrix(points, transform))
    else:
        print(f"ERROR: invalid method '{args.method}'", file=sys.stderr)
        return 1
    return 0


def _run_random(args: argparse.Namespace) -> int:
    rng = np.random.default_rng(args.seed)
    fixed = rng.uniform(-1.0, 1.0, size=(args.rows, args.cols))
    moving = rng.uniform(-1.0, 1.0, size=(args.rows, args.cols))
    if args.method == "rigid":
        registration = Rigid()
    elif args.method == "nonrigid":
        registration = Nonrigid()
    else:
        print(f"Invalid method: {args.method}")
        return 1
    if args.callback:
        registration.add_callback(_print_points)
    registration.run(fixed, moving)
    print("Registration completed OK")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpd", description="Coherent point drift registration."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    rigid_cmd = commands.add_parser(
        "rigid", help="rigid registration with scaling, printed as JSON"
    )
    rigid_cmd.add_argument("fixed")
    rigid_cmd.add_argument("moving")
    rigid_cmd.add_argument("outfile", nargs="?")
    rigid_cmd.set_defaults(handler=_run_rigid)

    transform_cmd = commands.add_parser(
        "transform",
        help="print a rigid or affine transformation matrix, or apply one",
    )
    transform_cmd.add_argument("method", help="rigid, affine or apply")
    transform_cmd.add_argument("first", help="fixed points, or transform for apply")
    transform_cmd.add_argument("second", help="moving points, or points for apply")
    transform_cmd.add_argument("outfile", nargs="?", help="output file for apply")
    transform_cmd.set_defaults(handler=_run_transform)

    random_cmd = commands.add_parser(
        "random", help="register two random point sets"
    )
    random_cmd.add_argument("method", help="rigid or nonrigid")
    random_cmd.add_argument("rows", type=int)
    random_cmd.add_argument("cols", type=int)
    random_cmd.add_argument(
        "--callback", action="store_true", help="print points after each iteration"
    )
    random_cmd.add_argument("--seed", type=int, default=None)
    random_cmd.set_defaults(handler=_run_random)
    return parser


def main(argv=None) -> int:
    """Run the command line and return the exit status."""
    args = _build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except (OSError, ValueError) as err:
        print(f"ERROR: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())