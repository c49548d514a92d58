"""Repository source entries, as found in a sources.list file."""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urljoin, urlparse

from aptrelease.constants import IN_RELEASE, RELEASE, RELEASE_GPG
from aptrelease.errors import InvalidRepository


class SourceType(str, Enum):
    """Kind of archive entry.
    BINARY: "deb" lines, Packages indexes per architecture.
    SOURCE: "deb-src" lines, Sources indexes.
    """

    BINARY = "deb"
    SOURCE = "deb-src"


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    if parsed.scheme in ("http", "https"):
        return bool(parsed.netloc)
    return parsed.scheme == "file" and bool(parsed.path)


@dataclass(frozen=True)
class RepositorySource:
    """A single archive entry: base URI, distribution and components."""

    type: SourceType
    base_uri: str
    distribution: str
    components: tuple[str, ...]

    @classmethod
    def parse(cls, entry: str) -> "RepositorySource":
        """Parse a one-line sources.list entry.

        Args:
            entry: A line such as "deb http://ftp.debian.org/debian squeeze main contrib non-free"

        Returns:
            The parsed RepositorySource

        Raises:
            InvalidRepository: if the line is not a deb/deb-src entry with a URL, distribution and components
        """
        tokens = entry.split()
        if len(tokens) < 4:
            raise InvalidRepository(entry, "expected type, URI, distribution and at least one component")
        try:
            source_type = SourceType(tokens[0])
        except ValueError:
            raise InvalidRepository(entry, f"unknown source type {tokens[0]!r}") from None
        if not _is_url(tokens[1]):
            raise InvalidRepository(entry, f"not a URL: {tokens[1]!r}")

        return cls(
            type=source_type,
            base_uri=tokens[1],
            distribution=tokens[2].strip("/"),
            components=tuple(dict.fromkeys(tokens[3:])),
        )

    def __str__(self) -> str:
        return " ".join([self.type.value, self.base_uri, self.distribution, *self.components])

    def dist_url(self, path: str) -> str:
        """Return the URL of a file below dists/<distribution>/."""
        base = self.base_uri if self.base_uri.endswith("/") else f"{self.base_uri}/"
        return urljoin(base, f"dists/{self.distribution}/{path.lstrip('/')}")

    @property
    def in_release_url(self) -> str:
        return self.dist_url(IN_RELEASE)

    @property
    def release_url(self) -> str:
        return self.dist_url(RELEASE)

    @property
    def release_gpg_url(self) -> str:
        return self.dist_url(RELEASE_GPG)
