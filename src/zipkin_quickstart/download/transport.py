"""
HTTP Transport

Single-attempt HTTP(S) GET built on requests. Downloads stream into a
temporary sibling file that only replaces the destination once the body has
been written completely.
"""

import importlib.metadata
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from zipkin_quickstart.constants import (
    APP_NAME,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
)
from zipkin_quickstart.exceptions import ResolutionError, TransportError
from zipkin_quickstart.log_utils import logger

from .interfaces import Pathish, Transport

_USER_AGENT_CACHE: Optional[str] = None


def get_user_agent() -> str:
    """
    Get the User-Agent string used for HTTP requests.

    Returns:
        The string `zipkin-quickstart/{version}`, where `{version}` is the installed package version or `unknown` if the version cannot be determined.
    """
    global _USER_AGENT_CACHE

    if _USER_AGENT_CACHE is None:
        try:
            app_version = importlib.metadata.version(APP_NAME)
        except importlib.metadata.PackageNotFoundError:
            app_version = "unknown"

        _USER_AGENT_CACHE = f"{APP_NAME}/{app_version}"

    return _USER_AGENT_CACHE


def _remove_temp_file(temp_path: str) -> None:
    if os.path.exists(temp_path):
        try:
            os.remove(temp_path)
        except OSError as e:
            logger.warning(f"Error removing temporary file {temp_path}: {e}")


class RequestsTransport(Transport):
    """
    Transport backed by a requests Session.

    No retries are configured; every request is made exactly once and bounded
    by `timeout` seconds.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.setdefault("User-Agent", get_user_agent())

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        logger.debug(f"[dim]> GET {url}[/dim]")
        try:
            response = self.session.get(url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise TransportError(
                f"Timed out after {self.timeout}s fetching {url}",
                url=url,
                details=str(e),
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Network error fetching {url}", url=url, details=str(e)
            ) from e

        logger.debug(
            f"Received HTTP response status code: {response.status_code} for URL: {url}"
        )
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            response.close()
            raise TransportError(
                f"HTTP {response.status_code} fetching {url}",
                url=url,
                status_code=response.status_code,
                details=str(e),
            ) from e
        return response

    def get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        response = self._get(url, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise ResolutionError(
                f"Registry response from {url} is not valid JSON", details=str(e)
            ) from e
        finally:
            response.close()

    def fetch(self, url: str, destination: Pathish) -> Path:
        """
        Download `url` to `destination`.

        The body is written to `<destination>.tmp.<pid>.<millis>` and moved into
        place with os.replace, so the destination is either the complete new
        body or untouched.

        Raises:
            TransportError: On network failure, non-success status, timeout, or
                when the destination cannot be written.
        """
        target = Path(destination)
        temp_path = f"{target}.tmp.{os.getpid()}.{int(time.time() * 1000)}"
        start_time = time.time()
        downloaded_bytes = 0

        response = self._get(url, stream=True)
        try:
            if target.parent and not target.parent.exists():
                target.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "wb") as file:
                for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK_SIZE):
                    if chunk:
                        file.write(chunk)
                        downloaded_bytes += len(chunk)
            os.replace(temp_path, target)
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"Network error while downloading {url}", url=url, details=str(e)
            ) from e
        except OSError as e:
            raise TransportError(
                f"Could not write {target}", url=url, details=str(e)
            ) from e
        finally:
            response.close()
            _remove_temp_file(temp_path)

        elapsed = time.time() - start_time
        logger.debug("Download elapsed time: %.2fs for %s", elapsed, url)
        file_size_mb = downloaded_bytes / (1024 * 1024)
        if file_size_mb >= 1.0:
            logger.debug(f"Downloaded: {target.name} ({file_size_mb:.1f} MB)")
        else:
            logger.debug(f"Downloaded: {target.name} ({downloaded_bytes} bytes)")
        return target

    def close(self) -> None:
        self.session.close()
