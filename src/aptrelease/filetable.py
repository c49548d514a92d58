"""Extraction of the per-file checksum table from Release fields."""

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum

from aptrelease.constants import (
    RELEASE_FIELD_MD5SUM,
    RELEASE_FIELD_SHA1,
    RELEASE_FIELD_SHA256,
    RELEASE_FIELD_SHA512,
)
from aptrelease.errors import InvalidDigest, InvalidDigestLength, InvalidFileSize, TruncatedFileRecord
from aptrelease.fields import FieldTable

logger = logging.getLogger(__name__)


class HashAlgorithm(Enum):
    """Digest families listed in Release files, declared weakest to strongest."""

    MD5 = ("md5", 16, RELEASE_FIELD_MD5SUM)
    SHA1 = ("sha1", 20, RELEASE_FIELD_SHA1)
    SHA256 = ("sha256", 32, RELEASE_FIELD_SHA256)
    SHA512 = ("sha512", 64, RELEASE_FIELD_SHA512)

    def __init__(self, hashlib_name: str, digest_size: int, field: str):
        self.hashlib_name = hashlib_name
        self.digest_size = digest_size
        self.field = field

    def new(self):
        """Return a fresh hashlib object for this algorithm."""
        return hashlib.new(self.hashlib_name)


@dataclass(frozen=True)
class FileRecord:
    """Integrity record for one file listed in a Release file."""

    path: str
    algorithm: HashAlgorithm
    digest: bytes
    size: int

    @property
    def hexdigest(self) -> str:
        return self.digest.hex()


def _parse_record(field: str, algorithm: HashAlgorithm, tokens: list[str], i: int) -> FileRecord:
    digest_hex = tokens[i]
    try:
        digest = bytes.fromhex(digest_hex)
    except ValueError:
        raise InvalidDigest(field, f"digest is not a hex string: {digest_hex!r}") from None
    if len(digest) != algorithm.digest_size:
        raise InvalidDigestLength(
            field, f"digest {digest_hex!r} is {len(digest)} bytes, expected {algorithm.digest_size}"
        )

    if i + 1 >= len(tokens):
        raise TruncatedFileRecord(field, f"missing file size after digest {digest_hex!r}")
    size_str = tokens[i + 1]
    if size_str.startswith("-") and size_str[1:].isascii() and size_str[1:].isdigit():
        raise InvalidFileSize(field, f"file size is negative: {size_str!r}")
    if not (size_str.isascii() and size_str.isdigit()):
        raise InvalidFileSize(field, f"file size is not a number: {size_str!r}")

    if i + 2 >= len(tokens):
        raise TruncatedFileRecord(field, f"missing file name after size {size_str!r}")

    return FileRecord(path=tokens[i + 2], algorithm=algorithm, digest=digest, size=int(size_str))


def parse_file_table(table: dict[str, FileRecord], value: str, algorithm: HashAlgorithm) -> None:
    """Parse one checksum field value into table, replacing existing records per path.

    The value is a whitespace separated run of "digest size path" triples. A record
    is only inserted once all three of its tokens have been validated.
    """
    tokens = value.split()
    for i in range(0, len(tokens), 3):
        record = _parse_record(algorithm.field, algorithm, tokens, i)
        table[record.path] = record


def read_file_table(fields: FieldTable) -> dict[str, FileRecord]:
    """Build the file table of a Release file.

    Each supported checksum field is processed from the weakest to the strongest
    algorithm, so every path ends up with the strongest record available for it.
    Missing checksum fields are skipped.

    Args:
        fields: The parsed Release fields

    Returns:
        Mapping of path (relative to the Release file's directory) to FileRecord

    Raises:
        FileTableError: if a present checksum field contains a malformed record
    """
    table: dict[str, FileRecord] = {}
    for algorithm in HashAlgorithm:
        value = fields.get(algorithm.field)
        if value is None:
            continue
        parse_file_table(table, value, algorithm)
    logger.debug(f"Read {len(table)} file records from release fields")
    return table
