"""Builders for fake archives and signed documents used across the test suite."""

import base64
import gzip
import hashlib
from dataclasses import dataclass, field

import httpx

from aptrelease.errors import SignatureInvalid, UnknownSigner
from aptrelease.keyring import Signer
from aptrelease.signed import SignedDocument
from aptrelease.transport import HTTPTransport

BASE_URL = "http://archive.test/ubuntu"
SOURCE_LINE = f"deb {BASE_URL} xenial main"
DIST_PATH = "/ubuntu/dists/xenial"
FAKE_FINGERPRINT = "0123456789ABCDEF0123456789ABCDEF01234567"

PACKAGES_TEXT = b"""Package: hello
Version: 2.10-1
Architecture: amd64
Filename: pool/main/h/hello/hello_2.10-1_amd64.deb
Size: 56132

Package: nginx
Version: 1.10.0-0ubuntu0.16.04.1
Architecture: amd64
Filename: pool/main/n/nginx/nginx_1.10.0-0ubuntu0.16.04.1_amd64.deb
Size: 3498
"""
PACKAGES_GZ = gzip.compress(PACKAGES_TEXT, mtime=0)


def armor(body: bytes, block_type: str = "PGP SIGNATURE") -> bytes:
    encoded = base64.b64encode(body).decode()
    lines = [encoded[i : i + 64] for i in range(0, len(encoded), 64)]
    return (f"-----BEGIN {block_type}-----\n\n" + "\n".join(lines) + f"\n-----END {block_type}-----\n").encode()


def unarmor(data: bytes) -> bytes:
    """Return the base64 body of an armored block written by armor."""
    lines = data.strip().split(b"\n")
    return base64.b64decode(b"".join(line for line in lines[1:-1] if line))


def clearsign(text: bytes, signature: bytes) -> bytes:
    """Wrap text and an armored signature in clearsign framing, dash-escaping as needed."""
    lines = text.rstrip(b"\n").split(b"\n")
    escaped = [b"- " + line if line.startswith(b"-") else line for line in lines]
    return b"-----BEGIN PGP SIGNED MESSAGE-----\nHash: SHA256\n\n" + b"\n".join(escaped) + b"\n" + signature


def fake_signature(plaintext: bytes, fingerprint: str = FAKE_FINGERPRINT) -> bytes:
    digest = hashlib.sha256(plaintext).hexdigest()
    return armor(f"fake:{fingerprint}:{digest}".encode())


def fake_clearsigned(plaintext: bytes, fingerprint: str = FAKE_FINGERPRINT) -> bytes:
    return clearsign(plaintext, fake_signature(plaintext, fingerprint))


@dataclass
class FakeKeyring:
    """Trust store accepting fake signatures from a fixed set of fingerprints."""

    fingerprints: set[str] = field(default_factory=lambda: {FAKE_FINGERPRINT})
    verified: list[SignedDocument] = field(default_factory=list)

    def verify(self, document: SignedDocument) -> Signer:
        body = unarmor(document.signature).decode()
        _, fingerprint, digest = body.split(":")
        if fingerprint not in self.fingerprints:
            raise UnknownSigner(fingerprint[-16:])
        if hashlib.sha256(document.plaintext).hexdigest() != digest:
            raise SignatureInvalid("signature bad", fingerprint[-16:])
        self.verified.append(document)
        return Signer(fingerprint=fingerprint, key_id=fingerprint[-16:])


def build_release(files: dict[str, bytes], algorithms=("md5", "sha1", "sha256")) -> bytes:
    """Build a Release file listing files under the given checksum fields."""
    field_names = {"md5": "MD5Sum", "sha1": "SHA1", "sha256": "SHA256", "sha512": "SHA512"}
    lines = [
        "Origin: Ubuntu",
        "Label: Ubuntu",
        "Suite: xenial",
        "Codename: xenial",
        "Date: Thu, 21 Apr 2016 23:23:46 UTC",
        "Architectures: amd64 arm64 i386",
        "Components: main restricted",
        "Description: Ubuntu Xenial 16.04",
    ]
    for algorithm in algorithms:
        lines.append(f"{field_names[algorithm]}:")
        for path, content in files.items():
            digest = hashlib.new(algorithm, content).hexdigest()
            lines.append(f" {digest} {len(content):>16} {path}")
    return ("\n".join(lines) + "\n").encode()


class MockArchive:
    """In-memory archive served through httpx.MockTransport."""

    def __init__(self, files: dict[str, bytes] | None = None):
        self.files: dict[str, bytes] = dict(files or {})
        self.blocked: set[str] = set()
        self.requests: list[str] = []

    def block(self, name: str) -> None:
        """Answer 404 for dists/xenial/<name>."""
        self.blocked.add(f"{DIST_PATH}/{name}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url.path)
        if request.url.path in self.blocked or request.url.path not in self.files:
            return httpx.Response(404)
        return httpx.Response(200, content=self.files[request.url.path])

    def transport(self) -> HTTPTransport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return HTTPTransport(client=client, chunk_size=16)

    def requested_names(self) -> list[str]:
        return [path.rsplit("/", 1)[-1] for path in self.requests]


@dataclass
class GPGSigner:
    gpg: object
    fingerprint: str

    def clearsign(self, data: bytes) -> bytes:
        signed = self.gpg.sign(data, keyid=self.fingerprint, clearsign=True)
        assert signed.data, signed.stderr
        return signed.data

    def detach_sign(self, data: bytes) -> bytes:
        signed = self.gpg.sign(data, keyid=self.fingerprint, detach=True)
        assert signed.data, signed.stderr
        return signed.data

    @property
    def public_key(self) -> str:
        return self.gpg.export_keys(self.fingerprint)
