import io
import os
import tarfile

import pytest

from imagescope.source import (
    ALL_SOURCES,
    Source,
    detect_source,
    detect_source_from_path,
    parse_source_scheme,
)


def _write_tar(path, names):
    path.parent.mkdir(parents=True, exist_ok=True)
    data = b"hello, world!"
    with tarfile.open(path, "w") as tar:
        for name in names:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


def _write_dir(path, names):
    path.mkdir(parents=True)
    for name in names:
        (path / name).write_text("hello, world!")
    return path


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    return home_dir


@pytest.mark.parametrize(
    "user_input, source, location",
    [
        ("podman:something:latest", Source.PODMAN_DAEMON, "something:latest"),
        ("docker-archive:a/place.tar", Source.DOCKER_TARBALL, "a/place.tar"),
        ("a5e", Source.UNKNOWN, ""),
        ("a5E", Source.UNKNOWN, ""),
        ("docker:something/something:latest", Source.DOCKER_DAEMON, "something/something:latest"),
        ("docker:latest", Source.DOCKER_DAEMON, "latest"),
        ("docker:docker:latest", Source.DOCKER_DAEMON, "docker:latest"),
        ("DoCKEr:something/something:latest", Source.DOCKER_DAEMON, "something/something:latest"),
        ("something/something:latest", Source.UNKNOWN, ""),
        ("blerg:something/something:latest", Source.UNKNOWN, ""),
        (".", Source.UNKNOWN, ""),
        ("./", Source.UNKNOWN, ""),
        ("../", Source.UNKNOWN, ""),
    ],
)
def test_detect_source(workdir, user_input, source, location):
    assert detect_source(user_input) == (source, location)


def test_detect_source_oci_tar_path(workdir):
    _write_tar(workdir / "a-potential" / "path", ["oci-layout"])
    assert detect_source("a-potential/path") == (Source.OCI_TARBALL, "a-potential/path")


def test_detect_source_unparsable_existing_path(workdir):
    _write_tar(workdir / "a-potential" / "path", [])
    assert detect_source("a-potential/path") == (Source.UNKNOWN, "")


def test_detect_source_honours_tilde(workdir, home):
    _write_tar(home / "a-potential" / "path", ["oci-layout"])
    expected = os.path.join(str(home), "a-potential", "path")
    assert detect_source("~/a-potential/path") == (Source.OCI_TARBALL, expected)


def test_detect_source_explicit_scheme_expands_tilde(workdir, home):
    _write_tar(home / "a-potential" / "path", ["oci-layout"])
    expected = os.path.join(str(home), "a-potential", "path")
    assert detect_source("oci-archive:~/a-potential/path") == (Source.OCI_TARBALL, expected)


def test_detect_source_rejects_user_specific_home(workdir, home):
    with pytest.raises(ValueError, match="home dir"):
        detect_source("docker-archive:~someone/image.tar")


@pytest.mark.parametrize(
    "scheme, expected",
    [
        ("tar", Source.UNKNOWN),
        ("tarball", Source.UNKNOWN),
        ("archive", Source.UNKNOWN),
        ("docker-archive", Source.DOCKER_TARBALL),
        ("docker-tar", Source.UNKNOWN),
        ("docker-tarball", Source.UNKNOWN),
        ("Docker", Source.DOCKER_DAEMON),
        ("DOCKER", Source.DOCKER_DAEMON),
        ("docker", Source.DOCKER_DAEMON),
        ("docker-daemon", Source.UNKNOWN),
        ("docker-engine", Source.UNKNOWN),
        ("oci-archive", Source.OCI_TARBALL),
        ("oci-tar", Source.UNKNOWN),
        ("oci-tarball", Source.UNKNOWN),
        ("oci", Source.UNKNOWN),
        ("oci-dir", Source.OCI_DIRECTORY),
        ("oci-directory", Source.UNKNOWN),
        ("podman", Source.PODMAN_DAEMON),
        ("registry", Source.OCI_REGISTRY),
        ("oci-registry", Source.OCI_REGISTRY),
        ("", Source.UNKNOWN),
        ("something", Source.UNKNOWN),
    ],
)
def test_parse_source_scheme(scheme, expected):
    assert parse_source_scheme(scheme) is expected


@pytest.mark.parametrize(
    "names, expected",
    [
        ([], Source.UNKNOWN),
        (["manifest", "index", "oci_layout"], Source.UNKNOWN),
        (["oci-layout"], Source.OCI_TARBALL),
        (["index.json"], Source.UNKNOWN),
        (["manifest.json"], Source.DOCKER_TARBALL),
        (["oci-layout", "manifest.json"], Source.DOCKER_TARBALL),
    ],
)
def test_detect_source_from_tar_path(tmp_path, names, expected):
    archive = _write_tar(tmp_path / "image.tar", names)
    assert detect_source_from_path(str(archive)) is expected


@pytest.mark.parametrize(
    "names, expected",
    [
        ([], Source.UNKNOWN),
        (["oci-layout"], Source.OCI_DIRECTORY),
        (["manifest", "index", "oci_layout"], Source.UNKNOWN),
    ],
)
def test_detect_source_from_dir_path(tmp_path, names, expected):
    directory = _write_dir(tmp_path / "image", names)
    assert detect_source_from_path(str(directory)) is expected


def test_detect_source_from_missing_path(tmp_path):
    assert detect_source_from_path(str(tmp_path / "does-not-exist")) is Source.UNKNOWN


def test_detect_source_from_empty_file(tmp_path):
    empty = tmp_path / "empty"
    empty.write_bytes(b"")
    assert detect_source_from_path(str(empty)) is Source.UNKNOWN


def test_detect_source_from_non_tar_file_raises(tmp_path):
    garbage = tmp_path / "garbage"
    garbage.write_bytes(b"definitely not a tar archive")
    with pytest.raises(tarfile.ReadError):
        detect_source_from_path(str(garbage))


@pytest.mark.parametrize(
    "scheme, display",
    [
        ("", "UnknownSource"),
        ("docker-archive", "DockerTarball"),
        ("docker", "DockerDaemon"),
        ("oci-dir", "OciDirectory"),
        ("oci-archive", "OciTarball"),
        ("registry", "OciRegistry"),
        ("podman", "PodmanDaemon"),
    ],
)
def test_source_str(scheme, display):
    assert str(parse_source_scheme(scheme)) == display


def test_all_sources_matches_known_schemes_in_order():
    schemes = ["docker-archive", "docker", "oci-dir", "oci-archive", "registry", "podman"]
    assert [parse_source_scheme(s) for s in schemes] == list(ALL_SOURCES)
    assert parse_source_scheme("unknown-scheme") not in ALL_SOURCES