"""Debian architecture names and host detection."""

import platform

from aptrelease.errors import UnsupportedArchitecture

# fmt: off
SUPPORTED_ARCHITECTURES = [
    "i386", "amd64",
    "armel", "armhf", "arm64",
    "riscv64",
    "mipsel", "mips64el",
    "loong64",
    "powerpc", "ppc64el",
    "s390x",
]

# platform.machine()     debian
_MACHINE_TO_ARCH = {
    "x86_64":  "amd64",
    "amd64":   "amd64",
    "i386":    "i386",
    "i486":    "i386",
    "i586":    "i386",
    "i686":    "i386",
    "aarch64": "arm64",
    "arm64":   "arm64",
    "armv7l":  "armhf",
    "armv6l":  "armel",
    "riscv64": "riscv64",
    "mips":    "mipsel",
    "mips64":  "mips64el",
    "loongarch64": "loong64",
    "ppc":     "powerpc",
    "ppc64le": "ppc64el",
    "s390x":   "s390x",
}
# fmt: on


def detect_architecture(machine: str | None = None) -> str:
    """Return the Debian architecture for the host, or "" if it has no mapping."""
    if machine is None:
        machine = platform.machine()
    return _MACHINE_TO_ARCH.get(machine.lower(), "")


def list_architectures() -> list[str]:
    return list(SUPPORTED_ARCHITECTURES)


def validate_architecture(architecture: str) -> str:
    if architecture not in SUPPORTED_ARCHITECTURES:
        raise UnsupportedArchitecture(architecture)
    return architecture
