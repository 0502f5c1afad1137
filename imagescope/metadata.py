"""Container image metadata and the options that override parts of it."""

from __future__ import annotations

import hashlib
import logging
import string
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from imagescope.platform import is_known_arch, is_known_os, parse_platform

log = logging.getLogger(__name__)

DEFAULT_REGISTRY = "index.docker.io"
_REGISTRY_ALIAS = "docker.io"
_DEFAULT_TAG = "latest"
_REPOSITORY_CHARS = frozenset(string.ascii_lowercase + string.digits + "_-./")
_TAG_CHARS = frozenset(string.ascii_letters + string.digits + "_-.")


class TagError(ValueError):
    """Raised when an image tag reference cannot be parsed."""


@dataclass
class Metadata:
    """Select attributes of a container image."""

    # sha256 of the image config json (not the manifest)
    id: str = ""
    # total size in bytes of all layer contents
    size: int = 0
    config: dict[str, Any] = field(default_factory=dict)
    media_type: str = ""
    tags: list[str] = field(default_factory=list)
    raw_manifest: bytes = b""
    manifest_digest: str = ""
    raw_config: bytes = b""
    repo_digests: list[str] = field(default_factory=list)
    architecture: str = ""
    variant: str = ""
    os: str = ""

    def ids(self) -> list[str]:
        """Return every tag followed by the image ID."""
        return [*self.tags, self.id]


MetadataOption = Callable[[Metadata], None]


def normalize_tag(tag: str) -> str:
    """Return the fully qualified form ``registry/repository:tag`` of a tag reference."""
    if "@" in tag:
        raise TagError(f"invalid tag {tag!r}: digests are not allowed")

    repository, tag_name = tag, _DEFAULT_TAG
    head, sep, tail = tag.rpartition(":")
    if sep and "/" not in tail:
        repository, tag_name = head, tail or _DEFAULT_TAG

    if len(tag_name) > 128 or not set(tag_name) <= _TAG_CHARS:
        raise TagError(f"invalid tag {tag!r}: bad tag name {tag_name!r}")

    registry = ""
    first, sep, rest = repository.partition("/")
    if sep and ("." in first or ":" in first or first == "localhost"):
        registry, repository = first, rest
    if registry in ("", _REGISTRY_ALIAS):
        registry = DEFAULT_REGISTRY

    if not 2 <= len(repository) <= 255 or not set(repository) <= _REPOSITORY_CHARS:
        raise TagError(f"invalid tag {tag!r}: bad repository {repository!r}")

    if registry == DEFAULT_REGISTRY and "/" not in repository:
        repository = "library/" + repository
    return f"{registry}/{repository}:{tag_name}"


def _sha256_digest(data: bytes) -> str:
    return "sha256:" + hashlib.sha256(data).hexdigest()


def with_tags(*tags: str) -> MetadataOption:
    """Add tags not already present; unparsable tags are skipped with a warning."""

    def apply(metadata: Metadata) -> None:
        existing = set(metadata.tags)
        for tag in tags:
            try:
                normalized = normalize_tag(tag)
            except TagError as err:
                log.warning("unable to parse additional image tag to add %r: %s", tag, err)
                continue
            if normalized not in existing:
                metadata.tags.append(normalized)

    return apply


def with_manifest(manifest: bytes) -> MetadataOption:
    """Set the raw manifest and its sha256 digest."""

    def apply(metadata: Metadata) -> None:
        metadata.raw_manifest = manifest
        metadata.manifest_digest = _sha256_digest(manifest)

    return apply


def with_manifest_digest(digest: str) -> MetadataOption:
    def apply(metadata: Metadata) -> None:
        metadata.manifest_digest = digest

    return apply


def with_config(config: bytes) -> MetadataOption:
    """Set the raw config and derive the image ID from its sha256 digest."""

    def apply(metadata: Metadata) -> None:
        metadata.raw_config = config
        metadata.id = _sha256_digest(config)

    return apply


def with_repo_digests(*digests: str) -> MetadataOption:
    def apply(metadata: Metadata) -> None:
        metadata.repo_digests.extend(digests)

    return apply


def with_platform(platform: str) -> MetadataOption:
    """Set OS, architecture and variant from a platform specifier."""

    def apply(metadata: Metadata) -> None:
        parsed = parse_platform(platform)
        metadata.architecture = parsed.architecture
        metadata.variant = parsed.variant
        metadata.os = parsed.os

    return apply


def with_architecture(architecture: str, variant: str) -> MetadataOption:
    """Set the architecture and variant; an empty architecture changes nothing."""

    def apply(metadata: Metadata) -> None:
        if not architecture:
            return
        if not is_known_arch(architecture):
            raise ValueError(f"unknown architecture: {architecture}")
        metadata.architecture = architecture
        metadata.variant = variant

    return apply


def with_os(os_name: str) -> MetadataOption:
    """Set the operating system; an empty name changes nothing."""

    def apply(metadata: Metadata) -> None:
        if not os_name:
            return
        if not is_known_os(os_name):
            raise ValueError(f"unknown OS: {os_name}")
        metadata.os = os_name

    return apply


def apply_metadata(metadata: Metadata, options: Iterable[MetadataOption]) -> None:
    """Apply options in order, so later options override earlier ones."""
    for option in options:
        try:
            option(metadata)
        except ValueError as err:
            raise ValueError(f"unable to override metadata option: {err}") from err