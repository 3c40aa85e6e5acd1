"""Parsing, normalising and storing proxy descriptions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from proxyrisk.console import LogType

_PROTOCOLS = ("http", "https", "socks5")

_WITH_AUTH = re.compile(r"(http|https|socks5)://(.+):(.+)@(.+):(\d+)", re.ASCII)
_NO_AUTH = re.compile(r"(http|https|socks5)://(.+):(\d+)", re.ASCII)
_PREFIX = re.compile(r"^(http|https|socks5):/?/?", re.ASCII)
_USER_PASS_HOST = re.compile(r"(.+):(.+)@(.+):(\d+)", re.ASCII)


class InvalidProxyError(ValueError):
    """Raised when a proxy description cannot be understood."""


@dataclass(frozen=True)
class ParsedProxy:
    """The parts of a proxy description."""

    host: str
    port: str
    user: str = ""
    password: str = ""
    protocol: str = ""

    @property
    def has_auth(self) -> bool:
        return bool(self.user and self.password)

    def url(self) -> str:
        """Return the proxy as a URL, with credentials when both are present."""
        if self.has_auth:
            return f"{self.protocol}://{self.user}:{self.password}@{self.host}:{self.port}"
        return f"{self.protocol}://{self.host}:{self.port}"


def parse_proxy(proxy: str) -> ParsedProxy:
    """Split a proxy written in one of the accepted notations into its parts."""
    proxy = proxy.strip()

    match = _WITH_AUTH.fullmatch(proxy)
    if match:
        protocol, user, password, host, port = match.groups()
        return ParsedProxy(host, port, user, password, protocol)

    match = _NO_AUTH.fullmatch(proxy)
    if match:
        protocol, host, port = match.groups()
        return ParsedProxy(host, port, protocol=protocol)

    protocol = ""
    match = _PREFIX.match(proxy)
    if match:
        protocol = match.group(1)
        proxy = _PREFIX.sub("", proxy, count=1)

    match = _USER_PASS_HOST.fullmatch(proxy)
    if match:
        user, password, host, port = match.groups()
        return ParsedProxy(host, port, user, password, protocol)

    parts = proxy.split(":")
    user = password = ""
    if len(parts) == 4:
        host, port, user, password = parts
    elif len(parts) == 3:
        if parts[0] in _PROTOCOLS:
            protocol, host, port = parts
        else:
            host, port, user = parts
    elif len(parts) == 2:
        host, port = parts
    else:
        raise InvalidProxyError(f"unrecognised proxy format: {proxy}")

    return ParsedProxy(host, port, user, password, protocol or "http")


def detect_proxy_protocol(proxy: str, logger=None) -> str:
    """Guess the protocol of a proxy description, defaulting to http."""
    proxy = proxy.lower()
    for protocol in _PROTOCOLS:
        if proxy.startswith(protocol + "://"):
            return protocol
    first = proxy.split(":")[0]
    if first in _PROTOCOLS:
        return first
    if logger is not None:
        logger.log(LogType.INFO, "No protocol detected for proxy %s, using HTTP as default", proxy)
    return "http"


def convert_proxy_format(proxy: str, logger=None) -> str:
    """Return the proxy as a URL, raising InvalidProxyError if it has no host or port."""
    try:
        parsed = parse_proxy(proxy)
    except InvalidProxyError:
        parsed = None
    if parsed is None or not parsed.host or not parsed.port:
        if logger is not None:
            logger.log(LogType.ERROR, "Invalid proxy format (missing host or port): %s", proxy)
        raise InvalidProxyError(f"missing host or port: {proxy}")

    if logger is not None:
        logger.log(
            LogType.INFO,
            "Parsed proxy - Protocol: %s, Host: %s, Port: %s, Auth: %s",
            parsed.protocol,
            parsed.host,
            parsed.port,
            str(parsed.has_auth).lower(),
        )
        if parsed.has_auth:
            logger.log(LogType.INFO, "Using proxy with authentication")
        else:
            logger.log(LogType.INFO, "Using proxy without authentication")
    return parsed.url()


def read_proxies_from_file(filename) -> list[str]:
    """Read non-blank, stripped lines from a file."""
    with open(filename, encoding="utf-8", newline="\n") as handle:
        return [line.strip() for line in handle if line.strip()]


def save_proxies_to_file(proxies: Iterable[str], filename) -> None:
    """Write one proxy per line, replacing the file."""
    with open(filename, "w", encoding="utf-8", newline="\n") as handle:
        for proxy in proxies:
            handle.write(proxy + "\n")