"""Download verified index files into a local mirror tree and read them back."""

import gzip
import logging
from collections.abc import Iterator
from pathlib import Path
from urllib.parse import urlparse

import aiofiles
from debian import deb822

from aptrelease.constants import DATA_DIR
from aptrelease.files import IndexFile
from aptrelease.transport import Transport

logger = logging.getLogger(__name__)


def mirror_path(url: str, base_dir: Path = DATA_DIR) -> Path:
    """Place an archive file under base_dir, keyed by host and URL path.

    >>> mirror_path("http://deb.debian.org/debian/dists/bookworm/main/binary-arm64/Packages.gz", Path("mirror"))
    PosixPath('mirror/deb.debian.org/debian/dists/bookworm/main/binary-arm64/Packages.gz')
    """
    parsed = urlparse(url)
    parts = [part for part in parsed.path.split("/") if part not in ("", ".", "..")]
    return base_dir.joinpath(parsed.netloc, *parts)


async def download_index(index_file: IndexFile, transport: Transport, output_path: Path) -> Path:
    """Stream an index file to disk, verifying it against its Release record.

    The file is written next to output_path first and only moved into place once
    its hash has been checked; nothing is left behind on failure.

    Returns:
        output_path
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    partial_path = output_path.with_name(output_path.name + ".partial")
    try:
        async with index_file:
            chunks = await index_file.open(transport)
            async with aiofiles.open(partial_path, "wb") as f:
                async for chunk in chunks:
                    await f.write(chunk)
            index_file.check_hash()
        partial_path.replace(output_path)
    except BaseException:
        partial_path.unlink(missing_ok=True)
        raise

    logger.debug(f"Downloaded {index_file.url} to {output_path}")
    return output_path


def iter_index_entries(local_path: Path) -> Iterator[dict]:
    """Yield the paragraphs of a downloaded Packages or Sources index, compressed or not.

    Indexes are only read after their hash has been checked, so undecodable text
    is an error rather than something to skip over.
    """
    name = local_path.name.removesuffix(".gz")
    paragraph_type = deb822.Sources if name == "Sources" else deb822.Packages
    opener = gzip.open if local_path.suffix == ".gz" else open
    with opener(local_path, "rt", encoding="utf-8") as handle:
        for paragraph in paragraph_type.iter_paragraphs(handle, use_apt_pkg=False):
            yield dict(paragraph)
