"""Exceptions raised while fetching, authenticating and verifying archive metadata."""


class AptReleaseError(Exception):
    """Base class for all aptrelease errors."""


class ClientConfigurationError(AptReleaseError):
    """An ArchiveClient is missing something it needs to operate."""


class InvalidRepository(AptReleaseError, ValueError):
    """A sources.list entry could not be parsed."""

    def __init__(self, entry: str, reason: str):
        super().__init__(f"unable to parse source {entry!r}: {reason}")
        self.entry = entry
        self.reason = reason


class UnsupportedArchitecture(AptReleaseError, ValueError):
    def __init__(self, architecture: str):
        super().__init__(f"unsupported architecture: {architecture!r}")
        self.architecture = architecture


class TransportError(AptReleaseError):
    """A GET failed, either on the network or with a non-success status."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(f"failed to get {url}: {message}")
        self.url = url
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class MalformedDocument(AptReleaseError):
    """Armor or clearsign framing could not be decoded."""


class AuthenticationError(AptReleaseError):
    """A signature did not authenticate its document. Always fatal."""


class UnknownSigner(AuthenticationError):
    def __init__(self, key_id: str | None):
        super().__init__(f"signature issued by key not in keyring: {key_id or 'unknown'}")
        self.key_id = key_id


class SignatureInvalid(AuthenticationError):
    def __init__(self, status: str | None, key_id: str | None = None):
        detail = f" (key {key_id})" if key_id else ""
        super().__init__(f"signature check failed: {status or 'no valid signature'}{detail}")
        self.status = status
        self.key_id = key_id


class MalformedFields(AptReleaseError):
    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class FileTableError(AptReleaseError):
    """A record in a checksum table field is defective."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class InvalidDigest(FileTableError):
    pass


class InvalidDigestLength(InvalidDigest):
    pass


class InvalidFileSize(FileTableError):
    pass


class TruncatedFileRecord(FileTableError):
    pass


class IndexFileError(AptReleaseError):
    """Misuse of, or integrity failure on, a streamed index file."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class HashMismatch(IndexFileError):
    pass


class NoHashData(IndexFileError):
    pass


class AlreadyOpen(IndexFileError):
    pass
