"""Reading docker archive manifests and deriving an OCI manifest from them."""

from __future__ import annotations

import hashlib
import json
import re
import tarfile
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike
from typing import Any

DOCKER_MANIFEST_SCHEMA2 = "application/vnd.docker.distribution.manifest.v2+json"
DOCKER_CONFIG_JSON = "application/vnd.docker.container.image.v1+json"
DOCKER_LAYER = "application/vnd.docker.image.rootfs.diff.tar.gzip"

_HASH_RE = re.compile(r"[^:]*:[0-9a-f]*")


class ManifestError(ValueError):
    """Raised when a manifest or image config is missing or malformed."""


class MultipleManifestsError(ManifestError):
    """Raised when an archive holds more than one image manifest."""

    def __init__(self, message: str = "cannot process multiple docker manifests") -> None:
        super().__init__(message)


_ENTRY_FIELDS = {"Config": str, "RepoTags": list, "Layers": list, "LayerSources": dict}


@dataclass
class DockerManifest:
    """The parsed ``manifest.json`` of a docker archive: one entry per image."""

    entries: list[dict[str, Any]]

    def all_tags(self) -> list[str]:
        """Return the tags of every entry, in order."""
        return [tag for entry in self.entries for tag in entry.get("RepoTags") or ()]


def _check_entry(entry: Any) -> dict[str, Any]:
    if entry is None:
        return {}
    if not isinstance(entry, dict):
        raise ManifestError("unable to parse manifest.json: entry is not an object")
    for key, expected in _ENTRY_FIELDS.items():
        value = entry.get(key)
        if value is not None and not isinstance(value, expected):
            raise ManifestError(f"unable to parse manifest.json: bad {key} field")
    return entry


def parse_manifest(raw: bytes | str) -> DockerManifest:
    """Parse docker archive manifest bytes; an empty manifest list is an error."""
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise ManifestError(f"unable to parse manifest.json: {err}") from err
    if parsed is None:
        parsed = []
    if not isinstance(parsed, list):
        raise ManifestError("unable to parse manifest.json: expected a list")
    if not parsed:
        raise ManifestError("no valid manifest.json found")
    return DockerManifest([_check_entry(entry) for entry in parsed])


def _find_member(tar: tarfile.TarFile, name: str) -> tarfile.TarInfo | None:
    return next((member for member in tar if member.name == name), None)


def _read_member(tar: tarfile.TarFile, member: tarfile.TarInfo) -> bytes:
    extracted = tar.extractfile(member)
    if extracted is None:
        raise ManifestError(f"tar entry is not a regular file: {member.name}")
    with extracted:
        return extracted.read()


def extract_manifest(tar_path: str | PathLike[str]) -> DockerManifest:
    """Read and parse ``manifest.json`` from a docker image archive."""
    with tarfile.open(tar_path, mode="r:") as tar:
        member = _find_member(tar, "manifest.json")
        if member is None:
            raise FileNotFoundError(f"file not found in tar: manifest.json ({tar_path})")
        contents = _read_member(tar, member)
    return parse_manifest(contents)


def generate_oci_manifest(
    tar_path: str | PathLike[str], manifest: DockerManifest
) -> tuple[dict[str, Any], bytes]:
    """Derive an OCI manifest from a single-image docker archive.

    Returns the manifest and the raw image config bytes.
    """
    with tarfile.open(tar_path, mode="r:") as tar:
        if len(manifest.entries) != 1:
            raise MultipleManifestsError()
        entry = manifest.entries[0]

        config_path = entry.get("Config") or ""
        config_member = _find_member(tar, config_path)
        if config_member is None:
            raise ManifestError(f"unable to find docker config: {config_path!r}")
        config = _read_member(tar, config_member)

        layer_sizes = []
        for layer_path in entry.get("Layers") or ():
            layer_member = _find_member(tar, layer_path)
            if layer_member is None:
                raise ManifestError(f"unable to find layer tar: {layer_path!r}")
            layer_sizes.append(layer_member.size)

    return assemble_oci_manifest(config, layer_sizes), config


def assemble_oci_manifest(config_bytes: bytes, layer_sizes: Sequence[int]) -> dict[str, Any]:
    """Build an OCI manifest from docker config bytes and the layer sizes in layer order.

    Layer digests are the config's diff IDs; ``layers`` is None when there are none.
    """
    try:
        config = json.loads(config_bytes)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise ManifestError(f"unable to parse docker config: {err}") from err
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ManifestError("unable to parse docker config: expected an object")

    rootfs = config.get("rootfs") or {}
    diff_ids = rootfs.get("diff_ids") or [] if isinstance(rootfs, dict) else None
    if not isinstance(diff_ids, list):
        raise ManifestError("unable to parse docker config: bad rootfs")
    for diff_id in diff_ids:
        if not isinstance(diff_id, str) or not _HASH_RE.fullmatch(diff_id):
            raise ManifestError(f"unable to parse docker config: bad diff ID {diff_id!r}")
    if len(diff_ids) > len(layer_sizes):
        raise ManifestError(
            f"found {len(diff_ids)} diff IDs but only {len(layer_sizes)} layer sizes"
        )

    layers = [
        {"mediaType": DOCKER_LAYER, "size": size, "digest": diff_id}
        for diff_id, size in zip(diff_ids, layer_sizes)
    ]
    return {
        "schemaVersion": 2,
        "mediaType": DOCKER_MANIFEST_SCHEMA2,
        "config": {
            "mediaType": DOCKER_CONFIG_JSON,
            "size": len(config_bytes),
            "digest": "sha256:" + hashlib.sha256(config_bytes).hexdigest(),
        },
        "layers": layers or None,
    }