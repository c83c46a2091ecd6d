"""
Rules that probe the filesystem or the network.

These are the only rules that perform I/O. Every I/O failure is converted to a
``ConfigValidationError`` at the call site; nothing propagates out of
``validate``. All probes block the validating thread for their duration.
"""
from __future__ import annotations

import socket
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Optional, Tuple, Union
from urllib.parse import urlparse

import requests

from configkit import logger
from configkit.errors import ConfigValidationError
from configkit.exceptions import RuleConfigurationError
from configkit.settings import get_settings

from .base import PropertyRule, Selector

LOOPBACK_HOST = "127.0.0.1"
MIN_PORT = 1
MAX_PORT = 65535
URL_SUGGESTION = "Check URL availability and network connectivity"


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class FileExistsRule(PropertyRule):
    """Fails when the path is not specified or no regular file exists there."""

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        path = self.get_value(instance)
        if _blank(path):
            return self.fail(
                section_name,
                f"{self.property_name} file path is not specified",
                path,
                ["Specify a valid file path"],
            )

        if not Path(path).is_file():
            return self.fail(
                section_name,
                f"File does not exist: {path}",
                path,
                [f"Create file at: {path}"],
            )
        return None


class DirectoryExistsRule(PropertyRule):
    """Fails when the path is not specified or no directory exists there."""

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        path = self.get_value(instance)
        if _blank(path):
            return self.fail(
                section_name,
                f"{self.property_name} directory path is not specified",
                path,
                ["Specify a valid directory path"],
            )

        if not Path(path).is_dir():
            return self.fail(
                section_name,
                f"Directory does not exist: {path}",
                path,
                [f"Create directory at: {path}"],
            )
        return None


def probe_port(port: int, host: str = LOOPBACK_HOST) -> Tuple[bool, Optional[str]]:
    """
    Try to bind and listen on ``host:port``, releasing the socket immediately.

    Returns ``(available, reason)``. The answer is stale as soon as it is
    returned: another process may take the port before the application does.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind((host, port))
            sock.listen(1)
        return True, None
    except OSError as exc:
        logger.debug(f"Port probe on {host}:{port} failed: {exc}")
        return False, str(exc)


class PortAvailableRule(PropertyRule):
    """
    Best-effort check that a TCP port can be bound on the loopback interface.

    The port may be taken between this check and the moment the application
    binds it.
    """

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        port = self.get_value(instance)
        if isinstance(port, bool) or not isinstance(port, int) or not MIN_PORT <= port <= MAX_PORT:
            return self.fail(
                section_name,
                f"Port number must be between {MIN_PORT} and {MAX_PORT} (current: {port})",
                port,
                ["Use a valid port number"],
                use_custom_message=False,
            )

        available, _ = probe_port(port)
        if not available:
            return self.fail(
                section_name,
                f"Port {port} is already in use",
                port,
                ["Choose a different port or stop the service using this port"],
            )
        return None


def _timeout_seconds(timeout: Union[float, int, timedelta, None]) -> float:
    if timeout is None:
        return get_settings().url_timeout
    if isinstance(timeout, timedelta):
        seconds = timeout.total_seconds()
    elif isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        seconds = float(timeout)
    else:
        raise RuleConfigurationError(
            f"Timeout must be a number of seconds or a timedelta, got {type(timeout).__name__}",
            "RULE_003",
        )
    if seconds <= 0:
        raise RuleConfigurationError(
            f"Timeout must be positive, got {seconds}",
            "RULE_003",
            {"timeout": seconds},
        )
    return seconds


def is_absolute_url(url: str) -> bool:
    """True for a URL with a scheme, a host and, if given, a valid port."""
    try:
        parsed = urlparse(url)
        parsed.port
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


class UrlReachableRule(PropertyRule):
    """
    Issues a real GET request and fails unless it answers with a 2xx status.

    A session is opened and closed for each validation call.
    """

    def __init__(
        self,
        selector: Selector,
        timeout: Union[float, int, timedelta, None] = None,
        message: Optional[str] = None,
        *,
        model_type: Optional[type] = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.timeout = _timeout_seconds(timeout)
        super().__init__(selector, message, model_type=model_type)
        self.session_factory = session_factory

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        url = self.get_value(instance)
        if _blank(url):
            return self.fail(
                section_name,
                f"{self.property_name} URL is not specified",
                url,
                ["Specify a valid URL"],
            )

        url = str(url).strip()
        if not is_absolute_url(url):
            return self.fail(
                section_name,
                f"Invalid URL format: {url}",
                url,
                ["Use format: http://example.com or https://example.com"],
                use_custom_message=False,
            )

        try:
            with self.session_factory() as session:
                with session.get(url, timeout=self.timeout) as response:
                    status = response.status_code
        except requests.RequestException as exc:
            logger.debug(f"Request to {url} failed: {exc}")
            return self.fail(
                section_name,
                f"Failed to reach URL: {exc}",
                url,
                [URL_SUGGESTION],
            )

        if not 200 <= status < 300:
            return self.fail(
                section_name,
                f"URL returned {status}: {url}",
                url,
                [URL_SUGGESTION],
            )
        return None
