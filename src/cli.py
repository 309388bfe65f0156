"""
Command-line interface for Clair Scanner.

Scans a local container image with Clair and checks the findings against
a whitelist. Exits with status 0 when the image is approved and 1 when it
contains unapproved vulnerabilities or the scan fails.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from constants import DEFAULT_ANALYZER_TIMEOUT, DEFAULT_CLAIR_URL, DEFAULT_SCANNER_IP, LAYER_SERVER_PORT
from core.config import ScanConfig
from core.exceptions import ScanInterrupted, ScannerException
from core.models import Whitelist
from core.orchestrator import ScanOrchestrator
from outputs.console import log_scan_summary
from outputs.json_report import JSONReportGenerator
from utils.logging_helpers import log_error_section
from utils.whitelist import load_whitelist

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def parse_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="clair-scanner",
        description="Scan local Docker images for vulnerabilities with Clair",
    )

    parser.add_argument("image", metavar="IMAGE", help="Name of the Docker image to scan.")

    clair_group = parser.add_argument_group("clair options")
    clair_group.add_argument("-c", "--clair", dest="clair_url", default=DEFAULT_CLAIR_URL, help="Clair URL.")
    clair_group.add_argument("--ip", dest="scanner_ip", default=DEFAULT_SCANNER_IP, help="IP address where clair-scanner is running on.")
    clair_group.add_argument("-p", "--port", type=int, default=LAYER_SERVER_PORT, help="Port serving image layers to Clair.")
    clair_group.add_argument("-t", "--timeout", type=float, default=DEFAULT_ANALYZER_TIMEOUT, help="Clair request timeout in seconds (default: none).")

    io_group = parser.add_argument_group("input/output")
    io_group.add_argument("-w", "--whitelist", type=Path, default=None, help="Path to the whitelist file.")
    io_group.add_argument("-r", "--report", type=Path, default=None, help="Write a JSON report to this file.")

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")

    return parser.parse_args(args)


def build_config(args: argparse.Namespace) -> ScanConfig:
    """
    Build the scan configuration from parsed arguments.

    Raises:
        WhitelistException: If the whitelist file cannot be loaded
    """
    whitelist = load_whitelist(args.whitelist) if args.whitelist else Whitelist.empty()
    return ScanConfig(
        image=args.image,
        clair_url=args.clair_url,
        scanner_ip=args.scanner_ip,
        port=args.port,
        timeout=args.timeout,
        whitelist=whitelist,
        report_path=args.report,
    )


def run(args: argparse.Namespace) -> int:
    """
    Run a scan and report its outcome.

    Returns:
        Process exit status
    """
    logger.info("Start clair-scanner")
    try:
        config = build_config(args)
        result = ScanOrchestrator(config).run()
        log_scan_summary(result, logger=logger)
        if config.report_path:
            JSONReportGenerator().generate(result, config.report_path)
    except ScanInterrupted as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except ScannerException as e:
        log_error_section("Scan failed.", [str(e)], logger=logger)
        return EXIT_FAILURE

    return EXIT_SUCCESS if result.approved else EXIT_FAILURE


def main(argv: Optional[list[str]] = None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
