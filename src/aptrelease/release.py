"""Retrieval and authentication of a distribution's Release file."""

import asyncio
import logging
from dataclasses import dataclass, field

from aptrelease.errors import AuthenticationError, MalformedDocument, TransportError
from aptrelease.fields import FieldTable, read_fields
from aptrelease.filetable import FileRecord, read_file_table
from aptrelease.keyring import Signer, TrustStore
from aptrelease.signed import DocumentForm, SignedDocument, decode_clearsigned, decode_detached
from aptrelease.sources import RepositorySource
from aptrelease.transport import HTTPTransport, Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Release:
    """An authenticated Release file.

    Only fetch_release and verify_release create these, after the signature has
    been checked.
    """

    source: RepositorySource
    plaintext: bytes = field(repr=False)
    signer: Signer
    form: DocumentForm

    def read_fields(self) -> FieldTable:
        return read_fields(self.plaintext)

    def read_file_table(self) -> dict[str, FileRecord]:
        """Return the index files listed in this release, keyed by path relative to dists/<distribution>/."""
        return read_file_table(self.read_fields())


async def _fetch_in_release(source: RepositorySource, transport: Transport) -> SignedDocument | None:
    url = source.in_release_url
    try:
        data = await transport.get(url)
    except TransportError as e:
        if e.not_found:
            logger.debug(f"No {url}, falling back to Release and Release.gpg")
        else:
            logger.warning(f"Unable to get {url}, falling back to Release and Release.gpg: {e}")
        return None

    try:
        return decode_clearsigned(data)
    except MalformedDocument as e:
        logger.warning(f"Ignoring undecodable {url}, falling back to Release and Release.gpg: {e}")
        return None


async def fetch_signed_document(source: RepositorySource, transport: Transport) -> SignedDocument:
    """Retrieve the signed Release document for source, without verifying it.

    The combined InRelease file is preferred. Release and Release.gpg are only
    fetched when InRelease cannot be retrieved or does not decode to a non-empty
    text with a signature block.

    Raises:
        TransportError: if Release or Release.gpg cannot be retrieved
        MalformedDocument: if Release.gpg is not an armored signature
    """
    document = await _fetch_in_release(source, transport)
    if document is not None:
        return document

    plaintext = await transport.get(source.release_url)
    signature = await transport.get(source.release_gpg_url)
    try:
        return decode_detached(plaintext, signature)
    except MalformedDocument as e:
        raise MalformedDocument(f"{source.release_gpg_url}: {e}") from e


async def verify_release(source: RepositorySource, document: SignedDocument, keyring: TrustStore) -> Release:
    """Authenticate document against keyring.

    Raises:
        AuthenticationError: if the signer is unknown or the signature is invalid
    """
    try:
        signer = await asyncio.to_thread(keyring.verify, document)
    except AuthenticationError as e:
        url = source.in_release_url if document.form is DocumentForm.COMBINED else source.release_url
        e.add_note(f"while verifying {url}")
        raise
    logger.info(f"Release for {source.distribution} signed by {signer.fingerprint} ({document.form.value})")
    return Release(source=source, plaintext=document.plaintext, signer=signer, form=document.form)


async def fetch_release(
    source: RepositorySource,
    keyring: TrustStore,
    transport: Transport | None = None,
) -> Release:
    """Download and authenticate the Release file of source.

    A signature failure on a retrieved InRelease file is fatal; it never causes a
    retry with Release and Release.gpg.

    Args:
        source: The repository entry to fetch the Release for
        keyring: Trusted signing keys
        transport: Transport to use. Defaults to a new HTTPTransport

    Returns:
        The authenticated Release
    """
    if transport is None:
        transport = HTTPTransport()
    document = await fetch_signed_document(source, transport)
    return await verify_release(source, document, keyring)
