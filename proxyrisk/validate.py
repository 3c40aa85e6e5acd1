"""Checking that proxies can carry a simple HTTP request."""

from __future__ import annotations

from typing import Callable, Iterable
from urllib.parse import urlsplit

import requests

from proxyrisk.console import LogType
from proxyrisk.proxies import convert_proxy_format

VALIDATION_URL = "http://httpbin.org/ip"


class ProxyValidator:
    """Validates proxies by fetching a test page through them."""

    def __init__(self, timeout: float, logger, converter: Callable[[str], str] | None = None) -> None:
        self.timeout = timeout
        self.logger = logger
        self.converter = converter if converter is not None else convert_proxy_format

    def validate_proxy(self, proxy: str) -> bool:
        """Return True if a request through ``proxy`` answers with HTTP 200."""
        try:
            proxy_url = self.converter(proxy)
        except ValueError:
            return False
        if not proxy_url:
            return False

        try:
            parts = urlsplit(proxy_url)
            if not parts.scheme:
                raise ValueError("missing protocol scheme")
        except ValueError as exc:
            self.logger.log(LogType.ERROR, "Failed to parse proxy URL: %s", exc)
            return False

        self.logger.log(LogType.INFO, "Validating proxy: %s", proxy)
        try:
            response = requests.get(
                VALIDATION_URL,
                proxies={"http": proxy_url, "https": proxy_url},
                timeout=self.timeout,
            )
        except (requests.RequestException, ValueError) as exc:
            self.logger.log(LogType.ERROR, "Proxy validation failed for %s: %s", proxy, exc)
            return False

        with response:
            if response.status_code != 200:
                self.logger.log(
                    LogType.ERROR,
                    "Proxy validation failed for %s: HTTP status %d",
                    proxy,
                    response.status_code,
                )
                return False
        self.logger.log(LogType.SUCCESS, "Proxy validation successful for %s", proxy)
        return True

    def validate_and_save_proxies(self, proxy_list: Iterable[str], output_filename) -> list[str]:
        """Validate every proxy, write the working ones to a file and return them."""
        proxy_list = list(proxy_list)
        self.logger.log(LogType.INFO, "Starting proxy validation for %d proxies...", len(proxy_list))
        valid = [proxy for proxy in proxy_list if self.validate_proxy(proxy)]

        self.logger.log(LogType.INFO, "Saving %d valid proxies to %s", len(valid), output_filename)
        try:
            with open(output_filename, "w", encoding="utf-8", newline="\n") as handle:
                for proxy in valid:
                    handle.write(proxy + "\n")
        except OSError as exc:
            self.logger.log(LogType.ERROR, "Failed to create valid proxies file: %s", exc)
            return valid
        self.logger.log(
            LogType.SUCCESS, "Successfully saved %d valid proxies to %s", len(valid), output_filename
        )
        return valid