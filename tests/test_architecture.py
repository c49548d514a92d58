import pytest

from aptrelease.architecture import detect_architecture, list_architectures, validate_architecture
from aptrelease.errors import UnsupportedArchitecture


@pytest.mark.parametrize(
    "machine,expected",
    [
        ("x86_64", "amd64"),
        ("AMD64", "amd64"),
        ("aarch64", "arm64"),
        ("i686", "i386"),
        ("ppc64le", "ppc64el"),
        ("pdp11", ""),
    ],
)
def test_detect_architecture(machine, expected):
    assert detect_architecture(machine) == expected


def test_detect_host_architecture_is_supported_or_empty():
    arch = detect_architecture()
    assert arch == "" or arch in list_architectures()


def test_validate_architecture():
    assert validate_architecture("amd64") == "amd64"
    with pytest.raises(UnsupportedArchitecture):
        validate_architecture("x86_64")


def test_list_architectures_returns_copy():
    archs = list_architectures()
    archs.append("bogus")
    assert "bogus" not in list_architectures()
