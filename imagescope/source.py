"""Detection of where an image should be read from (daemon, archive, directory, registry)."""

from __future__ import annotations

import os
import tarfile
from enum import IntEnum
from typing import BinaryIO

SCHEME_SEPARATOR = ":"


class Source(IntEnum):
    """A concrete kind of image provider."""

    UNKNOWN = 0
    DOCKER_TARBALL = 1
    DOCKER_DAEMON = 2
    OCI_DIRECTORY = 3
    OCI_TARBALL = 4
    OCI_REGISTRY = 5
    PODMAN_DAEMON = 6

    def __str__(self) -> str:
        return _SOURCE_NAMES[self]


_SOURCE_NAMES = {
    Source.UNKNOWN: "UnknownSource",
    Source.DOCKER_TARBALL: "DockerTarball",
    Source.DOCKER_DAEMON: "DockerDaemon",
    Source.OCI_DIRECTORY: "OciDirectory",
    Source.OCI_TARBALL: "OciTarball",
    Source.OCI_REGISTRY: "OciRegistry",
    Source.PODMAN_DAEMON: "PodmanDaemon",
}

ALL_SOURCES = tuple(source for source in Source if source is not Source.UNKNOWN)

_SCHEMES = {
    "docker-archive": Source.DOCKER_TARBALL,
    "docker": Source.DOCKER_DAEMON,
    "podman": Source.PODMAN_DAEMON,
    "oci-dir": Source.OCI_DIRECTORY,
    "oci-archive": Source.OCI_TARBALL,
    "oci-registry": Source.OCI_REGISTRY,
    "registry": Source.OCI_REGISTRY,
}

_PATH_SOURCES = (Source.OCI_DIRECTORY, Source.OCI_TARBALL, Source.DOCKER_TARBALL)

# archive entries that identify the archive format, checked in this order
_ARCHIVE_MARKERS = (
    ("manifest.json", Source.DOCKER_TARBALL),
    ("oci-layout", Source.OCI_TARBALL),
)


def parse_source_scheme(scheme: str) -> Source:
    """Map a user-given scheme (case-insensitive) to a source."""
    return _SCHEMES.get(scheme.lower(), Source.UNKNOWN)


def _expand_home(path: str) -> str:
    if not path.startswith("~"):
        return path
    if len(path) > 1 and path[1] not in ("/", os.sep):
        raise ValueError("cannot expand user-specific home dir")
    home = os.path.expanduser("~")
    if home == "~":
        raise ValueError("unable to determine the home directory")
    return os.path.normpath(os.path.join(home, path[1:].lstrip("/" + os.sep)))


def _expand_or_raise(path: str) -> str:
    try:
        return _expand_home(path)
    except ValueError as err:
        raise ValueError(f"unable to expand potential home dir expression: {err}") from err


def detect_source(user_input: str) -> tuple[Source, str]:
    """Determine the image source and location from user input such as ``docker:alpine``.

    Without a scheme the input is treated as a path and inspected on disk.
    The location is empty when the source is unknown.
    """
    candidates = user_input.split(SCHEME_SEPARATOR, 1)
    location = user_input
    if len(candidates) == 1:
        source = detect_source_from_path(location)
    else:
        hint, location = candidates
        source = parse_source_scheme(hint)

    if source in _PATH_SOURCES:
        # an explicit scheme means the shell did not expand a leading tilde
        location = _expand_or_raise(location)
    elif source is Source.UNKNOWN:
        location = ""
    return source, location


def _tar_contains(archive: BinaryIO, name: str) -> bool:
    with tarfile.open(fileobj=archive, mode="r:") as tar:
        return any(member.name == name for member in tar)


def detect_source_from_path(image_path: str) -> Source:
    """Distinguish an OCI layout directory, an OCI archive and a docker archive on disk.

    Raises ``tarfile.ReadError`` when a file exists but is not a readable tar archive.
    """
    image_path = _expand_or_raise(image_path)
    try:
        stat = os.stat(image_path)
    except FileNotFoundError:
        return Source.UNKNOWN

    if os.path.isdir(image_path):
        try:
            os.stat(os.path.join(image_path, "oci-layout"))
        except FileNotFoundError:
            return Source.UNKNOWN
        except OSError:
            pass
        return Source.OCI_DIRECTORY

    if stat.st_size == 0:
        return Source.UNKNOWN

    with open(image_path, "rb") as archive:
        for name, source in _ARCHIVE_MARKERS:
            archive.seek(0)
            if _tar_contains(archive, name):
                return source
    return Source.UNKNOWN