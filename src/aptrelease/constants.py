from os import getenv, pathsep
from pathlib import Path

HTTP_TIMEOUT = float(getenv("APTRELEASE_HTTP_TIMEOUT", "30.0"))
CHUNK_SIZE = int(getenv("APTRELEASE_CHUNK_SIZE", "65536"))

# root of the local mirror tree written by the fetcher, created on first download
DATA_DIR = Path(getenv("APTRELEASE_DATA_DIR", "data")).resolve()

DEFAULT_KEYRINGS = [
    Path(p)
    for p in getenv("APTRELEASE_KEYRINGS", "/usr/share/keyrings/debian-archive-keyring.gpg").split(pathsep)
    if p
]

# Release file names under dists/<distribution>/
IN_RELEASE = "InRelease"
RELEASE = "Release"
RELEASE_GPG = "Release.gpg"

# Checksum table fields, in canonical form
RELEASE_FIELD_MD5SUM = "Md5sum"
RELEASE_FIELD_SHA1 = "Sha1"
RELEASE_FIELD_SHA256 = "Sha256"
RELEASE_FIELD_SHA512 = "Sha512"
