"""Command that validates proxies and keeps those with a zero fraud score."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Iterable, Mapping

from proxyrisk.console import ConsoleLogger, LogType
from proxyrisk.proxies import convert_proxy_format, read_proxies_from_file, save_proxies_to_file
from proxyrisk.riskscore import RiskScoreService
from proxyrisk.validate import ProxyValidator

INPUT_PROXIES_FILE = "proxies.txt"
OUTPUT_FILE = "proxies_risk_score_0.txt"
VALID_PROXIES_FILE = "validproxys.txt"
ENV_VARIABLE = "API_KEY"
REQUEST_TIMEOUT = 10.0
VALIDATION_TIMEOUT = 5.0


class ProxyCheckError(Exception):
    """Raised when a check run cannot go on."""


class MissingAPIKeyError(ProxyCheckError):
    """Raised when no API key is configured."""


def _convert(proxy: str) -> str:
    try:
        return convert_proxy_format(proxy)
    except ValueError:
        return ""


class ProxyService:
    """Ties proxy validation and risk scoring together."""

    def __init__(self, logger) -> None:
        self.logger = logger
        self.converter = _convert
        self.validator = ProxyValidator(VALIDATION_TIMEOUT, logger, _convert)
        self.risk_checker = RiskScoreService(REQUEST_TIMEOUT, logger, _convert)
        self.request_timeout = REQUEST_TIMEOUT

    def validate_and_save_proxies(self, proxy_list: Iterable[str], filename) -> list[str]:
        """Keep the proxies that work, write them to ``filename`` and return them."""
        valid: list[str] = []
        for proxy in proxy_list:
            formatted = self.converter(proxy)
            if not formatted:
                self.logger.log(LogType.ERROR, "Invalid proxy format: %s", proxy)
                continue
            if self.validator.validate_proxy(formatted):
                valid.append(proxy)
        try:
            save_proxies_to_file(valid, filename)
        except OSError as exc:
            raise ProxyCheckError(f"failed to save proxies: failed to create file {filename}: {exc}") from exc
        return valid


def get_api_key(environ: Mapping[str, str] | None = None) -> str:
    """Return the API key from the environment, raising if it is not set."""
    env = os.environ if environ is None else environ
    value = env.get(ENV_VARIABLE)
    if not value:
        raise MissingAPIKeyError(
            "API_KEY environment variable is not set. Please set it before running the application"
        )
    return value


def ask(logger, prompt: str, *args: object) -> str:
    """Show a question and return the stripped line typed in reply."""
    logger.log(LogType.QUESTION, prompt, *args)
    return sys.stdin.readline().strip()


def _prepare_proxies(logger) -> tuple[list[str], str, str]:
    try:
        key = get_api_key()
    except MissingAPIKeyError as exc:
        logger.log(LogType.ERROR, "%s", exc)
        logger.log(LogType.INFO, "Set the API_KEY environment variable with your IPQS API key")
        logger.log(LogType.INFO, "Example: export API_KEY=your_api_key_here")
        raise
    logger.log(LogType.SUCCESS, "API key loaded successfully from environment variable")

    strictness = ask(logger, "Enter strictness level (0-3) (leave blank for 0)") or "0"
    input_file = (
        ask(logger, "Enter proxy file name (leave blank for default '%s')", INPUT_PROXIES_FILE)
        or INPUT_PROXIES_FILE
    )

    try:
        proxies = read_proxies_from_file(input_file)
    except (OSError, UnicodeDecodeError) as exc:
        error = ProxyCheckError(f"failed to open file {input_file}: {exc}")
        logger.log(LogType.ERROR, "Failed to read proxies from file: %s", error)
        raise error from exc
    logger.log(LogType.SUCCESS, "Successfully read %d proxies from %s", len(proxies), input_file)
    if not proxies:
        logger.log(LogType.ERROR, "No proxies found in the file. Exiting.")
        raise ProxyCheckError("no proxies found in input file")
    return proxies, key, strictness


def run(logger) -> None:
    """Validate the proxies, score them and save the clean ones."""
    service = ProxyService(logger)
    proxies, key, strictness = _prepare_proxies(logger)
    valid = service.validate_and_save_proxies(proxies, VALID_PROXIES_FILE)
    if not valid:
        raise ProxyCheckError("no valid proxies found")
    clean = service.risk_checker.filter_proxies(valid, key, strictness)
    try:
        save_proxies_to_file(clean, OUTPUT_FILE)
    except OSError as exc:
        raise ProxyCheckError(f"failed to create file {OUTPUT_FILE}: {exc}") from exc
    logger.log(LogType.SUCCESS, "Found %d clean proxies", len(clean))


def main(argv=None) -> int:
    """Run the checker interactively; return the process exit status."""
    parser = argparse.ArgumentParser(
        prog="proxyrisk",
        description="Validate proxies and keep those whose outbound address has a fraud score of 0.",
    )
    parser.parse_args(argv)

    logger = ConsoleLogger()
    logger.log(LogType.INFO, "Starting Proxy Risk Score Checker")
    try:
        run(logger)
    except ProxyCheckError as exc:
        logger.log(LogType.ERROR, "Application error: %s", exc)
        return 1
    logger.log(LogType.SUCCESS, "Operation completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())