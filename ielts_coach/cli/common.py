"""Shared CLI setup: logging flags and gateway construction."""
import argparse
import logging
import sys

from ielts_coach.tools.gateway import AIGateway, GatewayConfig, GeminiGateway, RetryingGateway, init_gateway


def add_logging_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (shows AI input/output, very verbose)"
    )


def configure_logging(args: argparse.Namespace) -> None:
    if args.debug:
        log_level = logging.DEBUG
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif args.verbose:
        log_level = logging.INFO
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
    else:
        log_level = logging.WARNING
        log_format = "%(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def setup_gateway(retries: int = 3) -> AIGateway:
    """Install the process gateway from the environment, wrapped with retries."""
    gateway = GeminiGateway(GatewayConfig.from_env())
    if retries > 1:
        gateway = RetryingGateway(gateway, attempts=retries)
    return init_gateway(gateway=gateway)
