"""CLI entry point: ``python -m lemlibpath path.txt -o out.txt``"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config.validate import (
    MAX_LENGTH,
    MIN_LENGTH,
    ValidationResult,
    validate_general_config,
    validate_path_config,
)
from .core.history import UpdateProperties
from .core.units import UnitOfLength, parse_number_in_string
from .core.workspace import Workspace
from .errors import LemLibPathError
from .formats.registry import get_format, list_names
from .logging_config import setup_logging

_UNIT_CHOICES = ["mm", "cm", "m", "in", "ft"]


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lemlibpath",
        description="Re-profile and re-export LemLib v0.4 path files.",
    )
    p.add_argument("input", type=Path, help="Input path file")
    p.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output path file (default: <input>.out.txt)",
    )
    p.add_argument(
        "--format", choices=list_names(), default=list_names()[0],
        help="Path file format (default: %(default)s)",
    )
    p.add_argument("--units", choices=_UNIT_CHOICES, default=None,
                   help="Display unit of length (default: as stored in the file, else inch)")

    # Sampling
    p.add_argument("--density", default=None,
                   help="Point density in the display unit (clamped to 0.1-100 cm)")

    # Speed profile
    p.add_argument("--decel", type=float, default=None,
                   help="Max deceleration rate, (0, 255]")
    p.add_argument("--max-speed", type=float, default=None,
                   help="Upper speed limit (0-127)")
    p.add_argument("--min-speed", type=float, default=None,
                   help="Lower speed limit (0-127)")

    # Output mode
    p.add_argument("--points", action="store_true",
                   help="Print the sampled points instead of writing a file")

    # Validation
    p.add_argument("--skip-validate", action="store_true",
                   help="Skip configuration checks")

    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--log-file", default=None, help="Also write the log to this file")
    return p


def _report(result: ValidationResult) -> bool:
    """Print *result*; return True when there are no errors."""
    for issue in result.issues:
        if issue.severity == "error":
            print(f"  ERROR: {issue.message}", file=sys.stderr)
        else:
            print(f"  Warning: {issue.message}")
    return not result.has_errors


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    output: Path = args.output or args.input.with_suffix(".out.txt")

    ws = Workspace(format=get_format(args.format))
    gc = ws.format.get_general_config()

    # Load
    print(f"Loading {args.input} ...")
    try:
        paths = ws.import_file(args.input.read_bytes())
    except (OSError, LemLibPathError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if not paths:
        print("Error: the file contains no path", file=sys.stderr)
        return 1
    path = paths[0]
    print(f"  {len(path.segments)} segment(s), unit {gc.uol.label()}")

    # Overrides
    try:
        if args.units is not None:
            ws.set_unit_of_length(UnitOfLength.from_label(args.units))
        if args.density is not None:
            density = parse_number_in_string(args.density, gc.uol, MIN_LENGTH, MAX_LENGTH)
            if density is None:
                print(f"Error: invalid density {args.density!r}", file=sys.stderr)
                return 1
            ws.history.execute("Change point density", UpdateProperties(gc, {"point_density": density}))
        if args.decel is not None:
            ws.history.execute(
                f"Change path {path.uid} max deceleration rate",
                UpdateProperties(path.pc, {"max_deceleration_rate": args.decel}),
            )
        speed_changes = {}
        if args.min_speed is not None:
            speed_changes["from_"] = args.min_speed
        if args.max_speed is not None:
            speed_changes["to"] = args.max_speed
        if speed_changes:
            ws.history.execute(
                f"Change path {path.uid} min/max speed",
                UpdateProperties(path.pc.speed_limit, speed_changes),
            )
    except LemLibPathError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"  Density: {gc.point_density:g}{gc.uol.label()}  "
          f"Decel: {path.pc.max_deceleration_rate:g}  "
          f"Speed: {path.pc.speed_limit.from_:g}-{path.pc.speed_limit.to:g}")

    # Validate
    if not args.skip_validate:
        result = validate_general_config(gc)
        result.extend(validate_path_config(path.pc))
        if result.issues:
            print("Configuration issues:")
        if not _report(result):
            return 1

    # Points
    if args.points:
        points = ws.format.get_path_points(path).points
        print(f"{'x':>10} {'y':>10} {'distance':>10} {'speed':>8}")
        for pt in points:
            print(f"{pt.x:10.3f} {pt.y:10.3f} {pt.distance:10.3f} {pt.speed:8.3f}")
        return 0

    # Export
    try:
        data = ws.export_file()
    except LemLibPathError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    output.write_bytes(data)
    print(f"Wrote {output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
