import requests
import responses

from proxyrisk.console import LogType
from proxyrisk.proxies import convert_proxy_format
from proxyrisk.validate import VALIDATION_URL, ProxyValidator


class RecordingLogger:
    def __init__(self):
        self.entries = []

    def log(self, log_type, message, *args):
        self.entries.append((log_type, message % args if args else message))


def make_validator():
    logger = RecordingLogger()
    return ProxyValidator(5, logger, convert_proxy_format), logger


def test_validation_url_is_httpbin():
    validator, _ = make_validator()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, VALIDATION_URL, json={"origin": "203.0.113.5"}, status=200)
        assert validator.validate_proxy("example.com:8080") is True
        assert rsps.calls[0].request.url == "http://httpbin.org/ip"


def test_success_is_logged():
    validator, logger = make_validator()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, VALIDATION_URL, status=200)
        validator.validate_proxy("example.com:8080")
    assert logger.entries[-1] == (LogType.SUCCESS, "Proxy validation successful for example.com:8080")


def test_non_200_status_fails():
    validator, logger = make_validator()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, VALIDATION_URL, status=503)
        assert validator.validate_proxy("example.com:8080") is False
    assert logger.entries[-1][0] is LogType.ERROR
    assert "503" in logger.entries[-1][1]


def test_connection_error_fails():
    validator, logger = make_validator()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, VALIDATION_URL, body=requests.ConnectionError("refused"))
        assert validator.validate_proxy("example.com:8080") is False
    assert logger.entries[-1][0] is LogType.ERROR


def test_invalid_format_makes_no_request():
    validator, _ = make_validator()
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, VALIDATION_URL, status=200)
        assert validator.validate_proxy("not-a-proxy") is False
        assert len(rsps.calls) == 0


def test_url_without_scheme_fails_to_parse():
    logger = RecordingLogger()
    validator = ProxyValidator(5, logger, lambda proxy: "://example.com:8080")
    assert validator.validate_proxy("example.com:8080") is False
    assert logger.entries[0][0] is LogType.ERROR
    assert logger.entries[0][1].startswith("Failed to parse proxy URL")


def test_validate_and_save_writes_valid_only(tmp_path):
    validator, _ = make_validator()
    output = tmp_path / "valid.txt"
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, VALIDATION_URL, status=200)
        valid = validator.validate_and_save_proxies(["bad", "example.com:8080"], output)
    assert valid == ["example.com:8080"]
    assert output.read_text(encoding="utf-8") == "example.com:8080\n"


def test_validate_and_save_unwritable_output_returns_list(tmp_path):
    validator, logger = make_validator()
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, VALIDATION_URL, status=200)
        valid = validator.validate_and_save_proxies(["example.com:8080"], tmp_path)
    assert valid == ["example.com:8080"]
    assert logger.entries[-1][0] is LogType.ERROR