"""Authenticated access to Debian-style archive Release files and indexes."""

from .client import ArchiveClient
from .errors import (
    AlreadyOpen,
    AptReleaseError,
    AuthenticationError,
    HashMismatch,
    InvalidDigestLength,
    InvalidFileSize,
    MalformedDocument,
    MalformedFields,
    NoHashData,
    SignatureInvalid,
    TransportError,
    TruncatedFileRecord,
    UnknownSigner,
)
from .fields import FieldTable, read_fields
from .files import IndexFile
from .filetable import FileRecord, HashAlgorithm, read_file_table
from .keyring import Keyring, Signer
from .release import Release, fetch_release
from .signed import DocumentForm, SignedDocument
from .sources import RepositorySource, SourceType
from .transport import HTTPTransport, Transport

__all__ = [
    "AlreadyOpen",
    "AptReleaseError",
    "ArchiveClient",
    "AuthenticationError",
    "DocumentForm",
    "FieldTable",
    "FileRecord",
    "HTTPTransport",
    "HashAlgorithm",
    "HashMismatch",
    "IndexFile",
    "InvalidDigestLength",
    "InvalidFileSize",
    "Keyring",
    "MalformedDocument",
    "MalformedFields",
    "NoHashData",
    "Release",
    "RepositorySource",
    "SignatureInvalid",
    "SignedDocument",
    "Signer",
    "SourceType",
    "Transport",
    "TransportError",
    "TruncatedFileRecord",
    "UnknownSigner",
    "fetch_release",
    "read_fields",
    "read_file_table",
]
