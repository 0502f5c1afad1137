"""Parsing and normalising of container platform specifiers such as ``linux/arm64/v8``."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass

_SPECIFIER_RE = re.compile(r"[A-Za-z0-9_-]+")

_KNOWN_OS = frozenset(
    {
        "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos", "js",
        "linux", "nacl", "netbsd", "openbsd", "plan9", "solaris", "windows", "zos",
    }
)

_KNOWN_ARCH = frozenset(
    {
        "386", "amd64", "amd64p32", "arm", "armbe", "arm64", "arm64be", "ppc64",
        "ppc64le", "mips", "mipsle", "mips64", "mips64le", "mips64p32", "mips64p32le",
        "ppc", "riscv", "riscv64", "s390", "s390x", "sparc", "sparc64", "wasm",
    }
)


class PlatformError(ValueError):
    """Raised when a platform specifier cannot be parsed."""


@dataclass
class Platform:
    """A CPU architecture, operating system and optional CPU variant."""

    architecture: str = ""
    os: str = ""
    variant: str = ""

    def __str__(self) -> str:
        return "/".join(field for field in (self.os, self.architecture, self.variant) if field)


def _invalid(specifier: str, reason: str) -> PlatformError:
    return PlatformError(f'failed to parse platform "{specifier}": {reason}: invalid argument')


def _unknown(specifier: str) -> PlatformError:
    return _invalid(specifier, f'"{specifier}": unknown operating system or architecture')


def _parse(specifier: str) -> Platform:
    if "*" in specifier:
        raise _invalid(specifier, f'"{specifier}": wildcards not yet supported')

    parts = specifier.split("/")
    for part in parts:
        if not _SPECIFIER_RE.fullmatch(part):
            raise _invalid(
                specifier,
                f'"{part}" is an invalid component of "{specifier}": '
                f'platform specifier component must match "^{_SPECIFIER_RE.pattern}$"',
            )

    platform = Platform()
    if len(parts) == 1:
        (only,) = parts
        os_guess = normalize_os(only)
        if is_known_os(os_guess):
            platform.os = os_guess
            return platform
        arch_guess, variant_guess = normalize_arch(only, "")
        if is_known_arch(arch_guess):
            platform.architecture = arch_guess
            platform.variant = variant_guess
            return platform
        raise _unknown(specifier)

    if len(parts) == 2:
        first, second = parts
        os_guess = normalize_os(first)
        if is_known_os(os_guess):
            platform.os = os_guess
            arch_guess, variant_guess = normalize_arch(second, "")
        else:
            arch_guess, variant_guess = normalize_arch(first, second)
        if is_known_arch(arch_guess):
            platform.architecture = arch_guess
            platform.variant = variant_guess
            return platform
        raise _unknown(specifier)

    if len(parts) == 3:
        first, second, third = parts
        os_guess = normalize_os(first)
        if is_known_os(os_guess):
            platform.os = os_guess
        arch_guess, variant_guess = normalize_arch(second, third)
        if is_known_arch(arch_guess):
            platform.architecture = arch_guess
            platform.variant = variant_guess
            return platform
        raise _unknown(specifier)

    raise _invalid(specifier, f'"{specifier}": cannot parse platform specifier')


def parse_platform(specifier: str) -> Platform:
    """Parse a platform specifier; the OS defaults to ``linux`` when none is given."""
    platform = _parse(specifier)
    if not platform.os:
        platform.os = "linux"
    return platform


def is_known_os(os_name: str) -> bool:
    """Tell whether a (normalised) operating system name is known."""
    return os_name in _KNOWN_OS


def is_known_arch(arch: str) -> bool:
    """Tell whether a (normalised) architecture name is known."""
    return arch in _KNOWN_ARCH


def _host_os() -> str:
    name = sys.platform
    if name.startswith("linux"):
        return "linux"
    if name in ("win32", "cygwin", "msys"):
        return "windows"
    if name == "sunos5":
        return "solaris"
    if name == "emscripten":
        return "js"
    for known in ("freebsd", "openbsd", "netbsd", "dragonfly", "darwin", "aix"):
        if name.startswith(known):
            return known
    return name


def normalize_os(os_name: str) -> str:
    """Lower-case an OS name, mapping ``macos`` to ``darwin``; empty means the host OS."""
    if not os_name:
        return _host_os()
    os_name = os_name.lower()
    if os_name == "macos":
        return "darwin"
    return os_name


def normalize_arch(arch: str, variant: str) -> tuple[str, str]:
    """Normalise common architecture aliases and their variants."""
    arch, variant = arch.lower(), variant.lower()
    if arch == "i386":
        return "386", ""
    if arch in ("x86_64", "x86-64"):
        return "amd64", ""
    if arch in ("aarch64", "arm64"):
        if variant in ("8", "v8"):
            variant = ""
        return "arm64", variant
    if arch == "armhf":
        return "arm", "v7"
    if arch == "armel":
        return "arm", "v6"
    if arch == "arm":
        if variant in ("", "7"):
            variant = "v7"
        elif variant in ("5", "6", "8"):
            variant = "v" + variant
        return "arm", variant
    return arch, variant