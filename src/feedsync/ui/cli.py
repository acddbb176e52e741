from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from feedsync.app import (
    check_specification,
    count_overrides,
    propagate_mapping,
    reprocess_product,
    reprocess_shop,
)
from feedsync.config import configure_logging
from feedsync.domain.model import PropagationMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve and validate product feed values")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "check-spec",
        help="Load the feed specification and verify every transform name resolves",
    )

    reprocess = subparsers.add_parser("reprocess", help="Recompute one product's feed values")
    reprocess.add_argument("product_id", type=str, help="Internal product id")

    reprocess_all = subparsers.add_parser(
        "reprocess-shop",
        help="Recompute feed values for every product of a shop",
    )
    reprocess_all.add_argument("shop_id", type=str, help="Internal shop id")

    count = subparsers.add_parser(
        "count-overrides",
        help="Count products whose override for an attribute a propagation would discard",
    )
    count.add_argument("shop_id", type=str, help="Internal shop id")
    count.add_argument("attribute", type=str, help="Feed attribute name")

    propagate = subparsers.add_parser(
        "propagate",
        help="Propagate a shop mapping change to the shop's products",
    )
    propagate.add_argument("shop_id", type=str, help="Internal shop id")
    propagate.add_argument("attribute", type=str, help="Feed attribute name")
    propagate.add_argument(
        "--mode",
        type=PropagationMode,
        choices=list(PropagationMode),
        default=PropagationMode.PRESERVE_OVERRIDES,
        help="apply_all discards per-product overrides; preserve_overrides skips them",
    )
    mapping = propagate.add_mutually_exclusive_group()
    mapping.add_argument(
        "--path",
        type=str,
        help="Store this source path as the shop mapping before propagating",
    )
    mapping.add_argument(
        "--clear",
        action="store_true",
        help="Remove the shop mapping (back to the default) before propagating",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        shop_id = _parse_uuid(parsed_args.shop_id) if hasattr(parsed_args, "shop_id") else None
        product_id = (
            _parse_uuid(parsed_args.product_id) if hasattr(parsed_args, "product_id") else None
        )
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "check-spec":
            report = check_specification()
            log.info(
                "Specification OK: attributes=%s, required=%s, conditional=%s, locked=%s, "
                "mapped=%s, transforms=%s",
                report.attributes,
                report.required,
                report.conditional,
                report.locked,
                report.mapped,
                report.transforms,
            )
        elif parsed_args.command == "reprocess" and product_id is not None:
            reprocess_product(product_id)
        elif parsed_args.command == "reprocess-shop" and shop_id is not None:
            result = reprocess_shop(shop_id)
            for failed_id, reason in result.failed.items():
                log.warning("Product %s failed: %s", failed_id, reason)
        elif parsed_args.command == "count-overrides" and shop_id is not None:
            total = count_overrides(shop_id, parsed_args.attribute)
            log.info(
                "%s product(s) of shop %s override %s", total, shop_id, parsed_args.attribute
            )
        elif parsed_args.command == "propagate" and shop_id is not None:
            update_mapping = parsed_args.path is not None or parsed_args.clear
            result = propagate_mapping(
                shop_id,
                parsed_args.attribute,
                parsed_args.mode,
                path=parsed_args.path,
                update_mapping=update_mapping,
            )
            for failed_id, reason in result.failed.items():
                log.warning("Product %s failed: %s", failed_id, reason)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
