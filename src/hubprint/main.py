"""
Command line entry point for hubprint.

    hubprint probe                      # which transports can be used here
    hubprint test                       # auto-detect, print a sample receipt
    hubprint test --transport serial    # force a transport
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from hubprint.core.errors import PrinterError
from hubprint.hardware.base import TransportKind
from hubprint.printing.manager import ConnectionManager
from hubprint.settings import get_settings

logger = logging.getLogger(__name__)

TRANSPORT_CHOICES = {
    "auto": None,
    "wireless": TransportKind.WIRELESS,
    "serial": TransportKind.SERIAL,
}


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hubprint", description="ESC/POS receipt printer tool")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("probe", help="Show which printer transports are available")

    test = sub.add_parser("test", help="Connect and print a test receipt")
    test.add_argument(
        "--transport",
        choices=sorted(TRANSPORT_CHOICES),
        default="auto",
        help="Transport to use (default: Bluetooth, then serial)",
    )
    return parser


def run_probe(manager: ConnectionManager) -> int:
    """Print transport availability."""
    print(f"Bluetooth: {'yes' if manager.is_wireless_supported() else 'no'}")
    print(f"Serial:    {'yes' if manager.is_serial_supported() else 'no'}")
    return 0


async def run_test(manager: ConnectionManager, kind: Optional[TransportKind]) -> int:
    """Connect, print the sample receipt and disconnect."""
    try:
        info = await manager.connect(kind)
        logger.info(f"Connected via {info.transport_kind.value}: {info.device_name}")
        await manager.print_test()
    except PrinterError as e:
        logger.error(f"Test print failed: {e}")
        return 1
    finally:
        await manager.disconnect()

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.debug or settings.debug)

    manager = ConnectionManager(settings=settings)

    if args.command == "probe":
        return run_probe(manager)

    try:
        return asyncio.run(run_test(manager, TRANSPORT_CHOICES[args.transport]))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
