"""
Pytest configuration and shared fixtures for the aptrelease test suite.
"""

import shutil

import gnupg
import pytest
from helpers import (
    DIST_PATH,
    PACKAGES_GZ,
    PACKAGES_TEXT,
    SOURCE_LINE,
    FakeKeyring,
    GPGSigner,
    MockArchive,
    build_release,
    fake_clearsigned,
    fake_signature,
)

from aptrelease.keyring import Keyring
from aptrelease.sources import RepositorySource


@pytest.fixture
def source():
    return RepositorySource.parse(SOURCE_LINE)


@pytest.fixture
def fake_keyring():
    return FakeKeyring()


@pytest.fixture
def index_files():
    return {
        "main/binary-amd64/Packages": PACKAGES_TEXT,
        "main/binary-amd64/Packages.gz": PACKAGES_GZ,
    }


@pytest.fixture
def release_text(index_files):
    return build_release(index_files)


@pytest.fixture
def archive(release_text, index_files):
    """Archive serving InRelease, Release and Release.gpg plus the listed index files"""
    files = {
        f"{DIST_PATH}/InRelease": fake_clearsigned(release_text),
        f"{DIST_PATH}/Release": release_text,
        f"{DIST_PATH}/Release.gpg": fake_signature(release_text),
    }
    files.update({f"{DIST_PATH}/{path}": content for path, content in index_files.items()})
    return MockArchive(files)


def _generate_signer(home) -> GPGSigner:
    if shutil.which("gpg") is None:
        pytest.skip("gpg binary not available")
    gpg = gnupg.GPG(gnupghome=str(home))
    key_input = gpg.gen_key_input(
        key_type="RSA",
        key_length=2048,
        name_real="Test Archive Signing Key",
        name_email="archive@example.com",
        no_protection=True,
    )
    key = gpg.gen_key(key_input)
    if not key.fingerprint:
        pytest.skip(f"unable to generate a gpg key: {key.stderr}")
    return GPGSigner(gpg=gpg, fingerprint=key.fingerprint)


@pytest.fixture(scope="session")
def gpg_signer(tmp_path_factory):
    """Throwaway signing key, generated once per session"""
    return _generate_signer(tmp_path_factory.mktemp("signer"))


@pytest.fixture(scope="session")
def other_gpg_signer(tmp_path_factory):
    return _generate_signer(tmp_path_factory.mktemp("other"))


@pytest.fixture
def trusted_keyring(gpg_signer):
    with Keyring.from_key_data(gpg_signer.public_key) as keyring:
        yield keyring


@pytest.fixture
def empty_keyring():
    with Keyring.from_key_data() as keyring:
        yield keyring
