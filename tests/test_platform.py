import pytest

from imagescope.platform import (
    Platform,
    PlatformError,
    is_known_arch,
    is_known_os,
    normalize_arch,
    normalize_os,
    parse_platform,
)


@pytest.mark.parametrize(
    "specifier, expected",
    [
        ("linux", Platform(os="linux")),
        ("linux/arm64", Platform(os="linux", architecture="arm64")),
        ("linux/arm64/v8", Platform(os="linux", architecture="arm64", variant="")),
        ("linux/arm/v8", Platform(os="linux", architecture="arm", variant="v8")),
        ("arm64", Platform(os="linux", architecture="arm64")),
        ("arm64/v8", Platform(os="linux", architecture="arm64", variant="")),
        ("arm/v8", Platform(os="linux", architecture="arm", variant="v8")),
        ("arm", Platform(os="linux", architecture="arm", variant="v7")),
        ("windows/arm/valpha", Platform(os="windows", architecture="arm", variant="valpha")),
    ],
)
def test_parse_platform(specifier, expected):
    assert parse_platform(specifier) == expected


@pytest.mark.parametrize(
    "specifier",
    ["quindows", "windows/aaarm", "linux/*", "", "linux/amd64/v1/extra", "linux/am d64"],
)
def test_parse_platform_errors(specifier):
    with pytest.raises(PlatformError):
        parse_platform(specifier)


def test_platform_error_is_value_error():
    with pytest.raises(ValueError, match="unknown operating system or architecture"):
        parse_platform("quindows")


def test_three_parts_with_unknown_os_defaults_to_linux():
    assert parse_platform("foo/arm/7") == Platform(os="linux", architecture="arm", variant="v7")


def test_aliases_are_normalised():
    assert parse_platform("MacOS/x86_64") == Platform(os="darwin", architecture="amd64")


@pytest.mark.parametrize(
    "platform, text",
    [
        (Platform(os="linux", architecture="arm64", variant="v8"), "linux/arm64/v8"),
        (Platform(os="linux"), "linux"),
        (Platform(architecture="amd64"), "amd64"),
        (Platform(), ""),
    ],
)
def test_platform_str(platform, text):
    assert str(platform) == text


def test_str_round_trip():
    platform = parse_platform("windows/arm/v6")
    assert parse_platform(str(platform)) == platform


@pytest.mark.parametrize(
    "arch, variant, expected",
    [
        ("i386", "x", ("386", "")),
        ("x86_64", "v1", ("amd64", "")),
        ("X86-64", "", ("amd64", "")),
        ("aarch64", "8", ("arm64", "")),
        ("arm64", "v9", ("arm64", "v9")),
        ("armhf", "", ("arm", "v7")),
        ("armel", "", ("arm", "v6")),
        ("arm", "", ("arm", "v7")),
        ("arm", "7", ("arm", "v7")),
        ("arm", "5", ("arm", "v5")),
        ("ARM", "V8", ("arm", "v8")),
        ("ppc64le", "", ("ppc64le", "")),
    ],
)
def test_normalize_arch(arch, variant, expected):
    assert normalize_arch(arch, variant) == expected


def test_normalize_os():
    assert normalize_os("MacOS") == "darwin"
    assert normalize_os("Linux") == "linux"
    assert normalize_os("") != ""


def test_known_names():
    assert is_known_os("linux")
    assert not is_known_os("quindows")
    assert is_known_arch("s390x")
    assert not is_known_arch("aaarm")