"""
Version Resolution and Validation

Turns the LATEST sentinel into a concrete release number using the registry
search API, and checks that every version the installer acts on is a plain
MAJOR.MINOR.PATCH release.
"""

import re
from typing import Any, Dict, Optional

from zipkin_quickstart.constants import (
    REGISTRY_SEARCH_URL,
    REGISTRY_SUBJECT,
    VERSION_REGEX_PATTERN,
)
from zipkin_quickstart.exceptions import InvalidVersionError, ResolutionError
from zipkin_quickstart.log_utils import logger

from .interfaces import Transport

VERSION_RX = re.compile(VERSION_REGEX_PATTERN)


def is_valid_version(version: str) -> bool:
    """Return True when `version` is exactly three dot-separated ASCII integers."""
    # fullmatch so a trailing newline is not accepted the way "$" would
    return VERSION_RX.fullmatch(version) is not None


def validate_version(version: str, resolved: bool = False) -> str:
    """
    Check that `version` is a release number the installer can download.

    No normalization is done: whitespace, a leading "v", or pre-release
    suffixes all cause rejection.

    Parameters:
        version (str): The version string to check.
        resolved (bool): True when the version came from the registry rather
            than from the user; only changes the error message.

    Returns:
        str: The unchanged version.

    Raises:
        InvalidVersionError: If the string is not MAJOR.MINOR.PATCH.
    """
    if isinstance(version, str) and is_valid_version(version):
        return version

    if resolved:
        message = (
            f'The registry reported version "{version}" as the latest release. '
            "That doesn't look like a valid Zipkin release version number"
        )
    else:
        message = (
            f'The target version is "{version}". '
            "That doesn't look like a valid Zipkin release version number"
        )
    raise InvalidVersionError(message, field="version", value=str(version))


class VersionResolver:
    """
    Resolves the latest published version of a Maven artifact.

    The registry is searched by group, artifact id and subject; the search
    must match exactly one package.
    """

    def __init__(
        self,
        transport: Transport,
        search_url: str = REGISTRY_SEARCH_URL,
        subject: str = REGISTRY_SUBJECT,
    ):
        self.transport = transport
        self.search_url = search_url
        self.subject = subject

    def build_search_params(self, group: str, artifact_id: str) -> Dict[str, str]:
        return {"g": group, "a": artifact_id, "subject": self.subject}

    def resolve_latest(self, group: str, artifact_id: str) -> str:
        """
        Return the `latest_version` of the single package matching group and artifact id.

        Raises:
            ResolutionError: If the search matches no package, more than one,
                or the single match has no usable `latest_version`.
            TransportError: If the registry cannot be reached.
        """
        packages = self.transport.get_json(
            self.search_url, params=self.build_search_params(group, artifact_id)
        )
        if not isinstance(packages, list):
            raise ResolutionError(
                "Unexpected registry response; expected a list of packages",
                group=group,
                artifact_id=artifact_id,
                details=f"got {type(packages).__name__}",
            )

        logger.debug(
            f"Registry search for {group}:{artifact_id} returned {len(packages)} package(s)"
        )
        if not packages:
            raise ResolutionError(
                "No package information found; the provided group or artifact ID may be invalid",
                group=group,
                artifact_id=artifact_id,
                details="no package found",
            )
        if len(packages) > 1:
            raise ResolutionError(
                "More than one package returned from search by Maven group and artifact ID",
                group=group,
                artifact_id=artifact_id,
                details="ambiguous result",
            )

        latest = self._latest_version_of(packages[0])
        if latest is None:
            raise ResolutionError(
                "Package information does not include a latest version",
                group=group,
                artifact_id=artifact_id,
            )
        return latest

    @staticmethod
    def _latest_version_of(package: Any) -> Optional[str]:
        if not isinstance(package, dict):
            return None
        latest = package.get("latest_version")
        if latest is None:
            return None
        latest = str(latest)
        return latest if latest.strip() else None
