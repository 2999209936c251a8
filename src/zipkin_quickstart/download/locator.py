"""
Artifact Locator

Pure helpers mapping a coordinate onto its Maven repository URL and local
filename. Nothing here touches the network or the filesystem.
"""

from typing import Optional

from zipkin_quickstart.constants import ARTIFACT_EXTENSION, REGISTRY_DOWNLOAD_BASE
from zipkin_quickstart.exceptions import InvalidVersionError, UsageError

from .interfaces import ArtifactCoordinate, ResolvedArtifact


def parse_coordinate(text: str) -> ArtifactCoordinate:
    """
    Split `GROUP:ARTIFACT:VERSION:CLASSIFIER` into a coordinate.

    Missing trailing parts are treated as empty and anything past the fourth
    colon is ignored.

    Raises:
        UsageError: If group, artifact id or version is empty.
    """
    parts = text.split(":")
    parts += [""] * (4 - len(parts))
    group, artifact_id, version, classifier = parts[:4]
    if not group or not artifact_id or not version:
        raise UsageError(
            f"Invalid artifact coordinate {text!r}",
            details="expected GROUP:ARTIFACT:VERSION:CLASSIFIER",
        )
    return ArtifactCoordinate(group, artifact_id, version, classifier)


def artifact_file_name(coordinate: ArtifactCoordinate) -> str:
    """Return `<id>-<version>[-<classifier>].jar`."""
    classifier_suffix = f"-{coordinate.classifier}" if coordinate.classifier else ""
    return (
        f"{coordinate.artifact_id}-{coordinate.version}"
        f"{classifier_suffix}{ARTIFACT_EXTENSION}"
    )


def artifact_directory_url(
    group: str, artifact_id: str, base_url: str = REGISTRY_DOWNLOAD_BASE
) -> str:
    """Return the repository directory listing all versions of an artifact."""
    group_path = group.replace(".", "/")
    return f"{base_url.rstrip('/')}/{group_path}/{artifact_id}/"


def locate(
    coordinate: ArtifactCoordinate,
    base_url: str = REGISTRY_DOWNLOAD_BASE,
    target: Optional[str] = None,
) -> ResolvedArtifact:
    """
    Build the download URL and local filename for a resolved coordinate.

    Parameters:
        coordinate (ArtifactCoordinate): Coordinate with a concrete version.
        base_url (str): Root of the Maven repository.
        target (Optional[str]): Local path to save to; defaults to the
            artifact's own file name.

    Raises:
        InvalidVersionError: If the coordinate still carries LATEST.
    """
    if coordinate.is_latest:
        raise InvalidVersionError(
            "Cannot locate an artifact before its version is resolved",
            field="version",
            value=coordinate.version,
        )

    file_name = artifact_file_name(coordinate)
    directory = artifact_directory_url(
        coordinate.group, coordinate.artifact_id, base_url
    )
    url = f"{directory}{coordinate.version}/{file_name}"
    return ResolvedArtifact(
        coordinate=coordinate,
        url=url,
        local_filename=target if target else file_name,
    )
