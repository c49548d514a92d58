"""OpenPGP trust store backed by gpg, via python-gnupg."""

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import gnupg

from aptrelease.errors import SignatureInvalid, UnknownSigner
from aptrelease.signed import SignedDocument

logger = logging.getLogger(__name__)

_NO_PUBLIC_KEY = "no public key"


def _text_lines(data: bytes) -> list[bytes]:
    """Lines of clearsigned text, ignoring trailing whitespace and trailing blank lines."""
    lines = [line.rstrip(b" \t\r") for line in data.split(b"\n")]
    while lines and not lines[-1]:
        lines.pop()
    return lines


@dataclass(frozen=True)
class Signer:
    """Identity of the key that made a valid signature."""

    fingerprint: str
    key_id: str | None = None
    username: str | None = None


class TrustStore(Protocol):
    def verify(self, document: SignedDocument) -> Signer:
        """Return the signer of document, or raise an AuthenticationError."""
        ...


class Keyring:
    """A set of trusted public keys held in a gpg home directory.

    The keyring is only read during verification, so one instance can be shared
    between concurrent retrievals.
    """

    def __init__(self, gnupghome: Path | str, keyring: list[Path | str] | None = None):
        self.gnupghome = Path(gnupghome)
        self._owns_home = False
        self.gpg = gnupg.GPG(
            gnupghome=str(self.gnupghome),
            keyring=[str(k) for k in keyring] if keyring else None,
        )

    @classmethod
    def from_key_data(cls, *keys: bytes | str) -> "Keyring":
        """Create a keyring in a private temporary home, importing the given key material."""
        home = Path(tempfile.mkdtemp(prefix="aptrelease-gnupg-"))
        home.chmod(0o700)
        keyring = cls(home)
        keyring._owns_home = True
        for key in keys:
            keyring.import_keys(key)
        return keyring

    @classmethod
    def from_files(cls, *paths: Path | str) -> "Keyring":
        """Create a keyring from armored or binary key files, e.g. /usr/share/keyrings/*.gpg."""
        return cls.from_key_data(*(Path(p).read_bytes() for p in paths))

    def import_keys(self, key_data: bytes | str) -> list[str]:
        result = self.gpg.import_keys(key_data)
        fingerprints = [fp for fp in result.fingerprints if fp]
        logger.debug(f"Imported {len(fingerprints)} key(s) into {self.gnupghome}")
        return fingerprints

    @property
    def fingerprints(self) -> list[str]:
        return [key["fingerprint"] for key in self.gpg.list_keys()]

    def verify(self, document: SignedDocument) -> Signer:
        """Check document's signature against the keys in this keyring.

        Clearsigned documents are passed to gpg as the framed block, and the text
        gpg reports as signed must be the document's plaintext. Detached pairs
        verify the signature against the plaintext.

        Raises:
            UnknownSigner: the issuing key is not in the keyring
            SignatureInvalid: the signature does not validate against the data
        """
        if document.original is not None:
            # gpg --decrypt on a clearsigned message writes out the text it verified
            verified = self.gpg.decrypt(document.original)
        else:
            with tempfile.TemporaryDirectory(prefix="aptrelease-sig-") as tmp:
                sig_path = Path(tmp) / "Release.gpg"
                sig_path.write_bytes(document.signature)
                verified = self.gpg.verify_data(str(sig_path), document.plaintext)

        if verified.valid:
            if document.original is not None and _text_lines(verified.data) != _text_lines(document.plaintext):
                raise SignatureInvalid("signed text differs from decoded text", verified.key_id)
            signer = Signer(fingerprint=verified.fingerprint, key_id=verified.key_id, username=verified.username)
            logger.debug(f"Good {document.form.value} signature from {signer.fingerprint}")
            return signer
        if verified.status == _NO_PUBLIC_KEY or (verified.key_id and not self.gpg.list_keys(keys=verified.key_id)):
            raise UnknownSigner(verified.key_id)
        raise SignatureInvalid(verified.status, verified.key_id)

    def close(self) -> None:
        """Remove the gpg home if this keyring created it."""
        if self._owns_home:
            shutil.rmtree(self.gnupghome, ignore_errors=True)
            self._owns_home = False

    def __enter__(self) -> "Keyring":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
