"""Framing of clearsigned and detached OpenPGP signed documents.

Only the framing is read here. The signature packets are left to gpg, which is
given exactly the block the plaintext was taken from.
"""

from dataclasses import dataclass, field
from enum import Enum

from aptrelease.errors import MalformedDocument

SIGNED_MESSAGE_HEADER = b"-----BEGIN PGP SIGNED MESSAGE-----"
SIGNATURE_HEADER = b"-----BEGIN PGP SIGNATURE-----"
SIGNATURE_FOOTER = b"-----END PGP SIGNATURE-----"


def _lines(data: bytes) -> list[bytes]:
    return [line.rstrip(b"\r") for line in data.split(b"\n")]


def _signature_end(lines: list[bytes], start: int) -> int:
    """Return the index of the end line of the armored signature beginning at lines[start]."""
    end = next((i for i in range(start + 1, len(lines)) if lines[i] == SIGNATURE_FOOTER), None)
    if end is None:
        raise MalformedDocument("armored signature has no end line")
    # armor headers are "Key: value", base64 never contains a space
    if not any(line.strip() and b": " not in line for line in lines[start + 1 : end]):
        raise MalformedDocument("armored signature is empty")
    return end


class DocumentForm(str, Enum):
    """How a signed Release document was obtained.
    COMBINED: a clearsigned InRelease file.
    DETACHED: a Release file plus its Release.gpg detached signature.
    """

    COMBINED = "combined"
    DETACHED = "detached"


@dataclass(frozen=True)
class SignedDocument:
    """Plaintext and the armored signature that covers it.

    For the combined form, original holds the clearsigned block the plaintext was
    read from, from its header line through the end of its signature. Nothing
    before or after that block is part of it.
    """

    form: DocumentForm
    plaintext: bytes
    signature: bytes = field(repr=False)
    original: bytes | None = field(default=None, repr=False)

    @property
    def signed_data(self) -> bytes:
        return self.original if self.original is not None else self.plaintext


def decode_detached(plaintext: bytes, signature: bytes) -> SignedDocument:
    """Pair a plaintext with its armored detached signature.

    Raises:
        MalformedDocument: if signature is not an armored PGP SIGNATURE block
    """
    lines = _lines(signature)
    start = next((i for i, line in enumerate(lines) if line == SIGNATURE_HEADER), None)
    if start is None:
        raise MalformedDocument("no armored PGP SIGNATURE block found")
    _signature_end(lines, start)
    return SignedDocument(form=DocumentForm.DETACHED, plaintext=plaintext, signature=signature)


def decode_clearsigned(data: bytes) -> SignedDocument:
    """Split the first clearsigned message in data into its plaintext and signature.

    The message header must start its line. Dash-escaping is removed and trailing
    whitespace is trimmed from each line of text; every text line, including the
    last, ends with a newline in the result.

    Raises:
        MalformedDocument: if data has no clearsign header, no text, or no complete signature block
    """
    raw = data.split(b"\n")
    lines = [line.rstrip(b"\r") for line in raw]
    start = next((i for i, line in enumerate(lines) if line == SIGNED_MESSAGE_HEADER), None)
    if start is None:
        raise MalformedDocument("no clearsigned message header found")

    i = start + 1
    while i < len(lines) and lines[i].strip():
        if b":" not in lines[i]:
            raise MalformedDocument(f"malformed clearsign header: {lines[i]!r}")
        i += 1
    if i >= len(lines):
        raise MalformedDocument("clearsigned message ends inside its headers")
    i += 1

    text: list[bytes] = []
    sig_start: int | None = None
    for j in range(i, len(lines)):
        line = lines[j]
        if line == SIGNATURE_HEADER:
            sig_start = j
            break
        if line.startswith(b"- "):
            line = line[2:]
        text.append(line.rstrip(b" \t"))

    if sig_start is None:
        raise MalformedDocument("clearsigned message has no signature block")
    if not any(text):
        raise MalformedDocument("clearsigned message has no text")
    end = _signature_end(lines, sig_start)

    return SignedDocument(
        form=DocumentForm.COMBINED,
        plaintext=b"\n".join(text) + b"\n",
        signature=b"\n".join(lines[sig_start : end + 1]) + b"\n",
        original=b"\n".join(raw[start : end + 1]) + b"\n",
    )
