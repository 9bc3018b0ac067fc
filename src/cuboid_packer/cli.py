from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from cuboid_packer.errors import InvariantViolationError, ItemsDoNotFitError, PackingError
from cuboid_packer.models import PackingResult, PackRequest
from cuboid_packer.plan import build_plan
from cuboid_packer.scalars import SCALAR_KINDS
from cuboid_packer.settings import Settings

logger = logging.getLogger("cuboid_packer.cli")

EXIT_OK = 0
EXIT_INTERNAL_ERROR = 1
EXIT_BAD_INPUT = 2


def load_input(path: Path) -> PackRequest:
    """
    Read a pack request JSON file.

    Either:
      {"bin": {"length": 8, "width": 8, "height": 12}, "items": [...]}
    or:
      {"bin_preset": "40HC", "items": [...]}
    with items shaped like {"id": "deck", "length": 2, "width": 8, "height": 12, "quantity": 4}.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    return PackRequest.model_validate(data)


def write_plan(plan: dict, path: str = "plan.json") -> Path:
    """
    Write a plan dictionary to a JSON file.

    Creates parent folders if needed, writes JSON with indent=2 and
    sort_keys=True, and overwrites the file on every run.
    """
    output_path = Path(path).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(plan, f, indent=2, sort_keys=True)
    logger.debug("plan written to %s", output_path)
    return output_path


def print_summary(result: PackingResult) -> None:
    print(
        f"Packed {result.item_count} items into {result.bin_count} bins, "
        f"Fill={result.fill_rate:.3f}, UsedVol={result.used_volume:.3f}, BinVol={result.total_bin_volume:.3f}"
    )
    for report in result.bins:
        print(f"  bin {report.index + 1}: {len(report.item_ids)} items, fill={report.fill_rate:.3f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cuboid-packer", description="3D first-fit-decreasing bin packer")
    parser.add_argument("--input", required=True, help="Input pack request JSON file")
    parser.add_argument("--output", required=True, help="Output plan JSON file")
    parser.add_argument(
        "--scalar",
        choices=list(SCALAR_KINDS),
        help="Numeric type for dimensions (overrides CUBOID_PACKER_SCALAR)",
    )
    parser.add_argument(
        "--tolerance",
        help="Exact-fit tolerance (overrides CUBOID_PACKER_EXACT_FIT_TOLERANCE)",
    )
    parser.add_argument(
        "--max-items",
        type=int,
        help="Refuse requests with more items than this (overrides CUBOID_PACKER_MAX_ITEMS)",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not print the summary")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env().override(
            scalar=args.scalar,
            exact_fit_tolerance=args.tolerance,
            max_items=args.max_items,
        )
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Invalid configuration: %s", e)
        return EXIT_BAD_INPUT

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        request = load_input(Path(args.input))
        result = build_plan(request, settings)
        write_plan(result.model_dump(), args.output)
    except OSError as e:
        logger.error("File error: %s", e)
        return EXIT_BAD_INPUT
    except ItemsDoNotFitError as e:
        logger.error("%s", e)
        return EXIT_BAD_INPUT
    except InvariantViolationError:
        logger.exception("Internal packing error")
        return EXIT_INTERNAL_ERROR
    except (PackingError, ValueError) as e:
        logger.error("Invalid request: %s", e)
        return EXIT_BAD_INPUT

    if not args.quiet:
        print_summary(result)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
