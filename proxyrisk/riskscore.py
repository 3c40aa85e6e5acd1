"""Looking up a proxy's outbound address and its fraud score."""

from __future__ import annotations

import json
from typing import Callable, Iterable
from urllib.parse import urlsplit

import requests

from proxyrisk.console import LogType
from proxyrisk.proxies import convert_proxy_format

IPINFO_ENDPOINT = "http://ipinfo.io/json"
IPQS_ENDPOINT = "https://ipqualityscore.com/api/json/ip/{api_key}/{ip}?strictness={strictness}"


class _ResponseFormatError(ValueError):
    """Raised when a JSON answer does not have the expected shape."""


def _json_object(body: bytes) -> dict:
    data = json.loads(body)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise _ResponseFormatError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _field(data: dict, name: str, kind: type, default):
    value = data.get(name)
    if value is None:
        return default
    if kind is int and isinstance(value, bool):
        raise _ResponseFormatError(f"field {name!r} has the wrong type")
    if not isinstance(value, kind):
        raise _ResponseFormatError(f"field {name!r} has the wrong type")
    return value


class RiskScoreService:
    """Finds the address a proxy exits from and asks for its fraud score."""

    def __init__(
        self,
        request_timeout: float,
        logger,
        converter: Callable[[str], str] | None = None,
    ) -> None:
        self.request_timeout = request_timeout
        self.logger = logger
        self.converter = converter if converter is not None else convert_proxy_format

    def _proxy_url(self, proxy: str) -> str:
        try:
            return self.converter(proxy) or ""
        except ValueError:
            return ""

    def get_outbound_ip(self, proxy: str) -> str | None:
        """Return the public address seen through ``proxy``, or None if it cannot be found."""
        proxy_url = self._proxy_url(proxy)
        if not proxy_url:
            return None
        self.logger.log(LogType.INFO, "Using formatted proxy: %s", proxy_url)

        try:
            if not urlsplit(proxy_url).scheme:
                raise ValueError("missing protocol scheme")
        except ValueError as exc:
            self.logger.log(LogType.ERROR, "Failed to parse proxy URL: %s", exc)
            return None

        self.logger.log(LogType.INFO, "Sending request to %s through proxy", IPINFO_ENDPOINT)
        try:
            response = requests.get(
                IPINFO_ENDPOINT,
                proxies={"http": proxy_url, "https": proxy_url},
                timeout=self.request_timeout,
            )
        except (requests.RequestException, ValueError) as exc:
            self.logger.log(LogType.ERROR, "Failed to get external IP for proxy %s: %s", proxy, exc)
            return None

        with response:
            if response.status_code != 200:
                self.logger.log(
                    LogType.ERROR,
                    "Failed to get external IP for proxy %s: HTTP status %d",
                    proxy,
                    response.status_code,
                )
                return None
            try:
                body = response.content
            except requests.RequestException as exc:
                self.logger.log(LogType.ERROR, "Failed to read response body: %s", exc)
                return None

        try:
            ip = _field(_json_object(body), "ip", str, "")
        except ValueError as exc:
            self.logger.log(LogType.ERROR, "Failed to parse JSON response: %s", exc)
            return None

        if not ip:
            self.logger.log(LogType.ERROR, "Could not retrieve external IP for proxy %s", proxy)
            return None
        self.logger.log(LogType.SUCCESS, "Successfully detected IP %s for proxy", ip)
        return ip

    def check_ip_risk_score(self, ip_address: str, api_key: str, strictness_level: str) -> int | None:
        """Return the fraud score of ``ip_address``, or None if the lookup fails."""
        url = IPQS_ENDPOINT.format(api_key=api_key, ip=ip_address, strictness=strictness_level)
        try:
            response = requests.get(url, timeout=self.request_timeout)
        except (requests.RequestException, ValueError) as exc:
            self.logger.log(LogType.ERROR, "Failed to check IP quality for %s: %s", ip_address, exc)
            return None

        with response:
            if response.status_code != 200:
                self.logger.log(
                    LogType.ERROR,
                    "Failed to query IPQS API for IP %s: HTTP status %d",
                    ip_address,
                    response.status_code,
                )
                return None
            try:
                body = response.content
            except requests.RequestException as exc:
                self.logger.log(LogType.ERROR, "Failed to read response body: %s", exc)
                return None

        try:
            data = _json_object(body)
            success = _field(data, "success", bool, False)
            message = _field(data, "message", str, "")
            fraud_score = _field(data, "fraud_score", int, 0)
        except ValueError as exc:
            self.logger.log(LogType.ERROR, "Failed to parse JSON response: %s", exc)
            return None

        if not success:
            self.logger.log(LogType.ERROR, "Failed to query IPQS API for IP %s: %s", ip_address, message)
            return None
        return fraud_score

    def filter_proxies(self, proxy_list: Iterable[str], api_key: str, strictness_level: str) -> list[str]:
        """Return the proxies whose outbound address has a fraud score of zero."""
        clean: list[str] = []
        for proxy in proxy_list:
            self.logger.log(LogType.INFO, "Checking proxy: %s", proxy)
            outbound_ip = self.get_outbound_ip(proxy)
            if not outbound_ip:
                self.logger.log(
                    LogType.ERROR, "Skipping proxy %s as external IP could not be determined", proxy
                )
                continue
            self.logger.log(LogType.INFO, "Detected outbound IP: %s", outbound_ip)
            score = self.check_ip_risk_score(outbound_ip, api_key, strictness_level)
            if score == 0:
                self.logger.log(LogType.SUCCESS, "Proxy %s has risk score 0", proxy)
                clean.append(proxy)
            elif score is not None and score >= 0:
                self.logger.log(LogType.INFO, "Proxy %s has risk score %d (skipped)", proxy, score)
        return clean