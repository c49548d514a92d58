"""High level client for Debian-style archive repositories."""

import logging

from aptrelease.architecture import detect_architecture, validate_architecture
from aptrelease.errors import ClientConfigurationError
from aptrelease.files import IndexFile
from aptrelease.keyring import TrustStore
from aptrelease.release import Release, fetch_release
from aptrelease.sources import RepositorySource, SourceType
from aptrelease.transport import HTTPTransport, Transport

logger = logging.getLogger(__name__)


def index_candidates(source: RepositorySource, component: str, architecture: str) -> list[str]:
    """Return the index paths for a component, most preferred first."""
    if source.type is SourceType.SOURCE:
        return [f"{component}/source/Sources.gz", f"{component}/source/Sources"]
    return [f"{component}/binary-{architecture}/Packages.gz", f"{component}/binary-{architecture}/Packages"]


class ArchiveClient:
    """Retrieves authenticated metadata from Debian-style archives.

    Args:
        keyring: Trusted signing keys, used to authenticate Release files. Required.
        architecture: Debian architecture to select package indexes for. Defaults to the host's.
        transport: Transport used for every request. Defaults to an HTTPTransport.
    """

    def __init__(
        self,
        keyring: TrustStore | None,
        architecture: str | None = None,
        transport: Transport | None = None,
    ):
        self.keyring = keyring
        self.architecture = architecture if architecture is not None else detect_architecture()
        self.transport = transport if transport is not None else HTTPTransport()

    def validate(self) -> None:
        """Raise if the client cannot be used."""
        if self.keyring is None:
            raise ClientConfigurationError("keyring is not set")
        validate_architecture(self.architecture)

    async def get_release(self, source: RepositorySource) -> Release:
        self.validate()
        return await fetch_release(source, self.keyring, self.transport)

    async def get_release_index(self, source: RepositorySource) -> bytes:
        """Return the authenticated contents of the distribution's Release file."""
        release = await self.get_release(source)
        return release.plaintext

    def get_package_indexes(self, source: RepositorySource, release: Release) -> list[IndexFile]:
        """Return handles for the package (or source) indexes of every component of source.

        The compressed index is used when the release lists it. Components whose
        index is not listed in the release are skipped.
        """
        self.validate()
        file_table = release.read_file_table()
        indexes: list[IndexFile] = []
        for component in source.components:
            candidates = index_candidates(source, component, self.architecture)
            path = next((p for p in candidates if p in file_table), None)
            if path is None:
                logger.warning(f"No index listed for {component} ({self.architecture}) in {source.release_url}")
                continue
            indexes.append(IndexFile(file_table[path], source.dist_url(path)))
        return indexes
