"""aptrelease command line tool."""

import asyncio
import logging
from argparse import ArgumentParser
from enum import StrEnum
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from aptrelease.architecture import detect_architecture, list_architectures
from aptrelease.client import ArchiveClient
from aptrelease.constants import DATA_DIR, DEFAULT_KEYRINGS
from aptrelease.errors import AptReleaseError
from aptrelease.fetcher import download_index, iter_index_entries, mirror_path
from aptrelease.keyring import Keyring
from aptrelease.sources import RepositorySource

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = ["Origin", "Label", "Suite", "Codename", "Version", "Date", "Architectures", "Components"]


class Command(StrEnum):
    RELEASE = "release"
    INDEXES = "indexes"


parser = ArgumentParser(
    prog="aptrelease",
    description="Fetch and authenticate the Release file of a Debian-style archive.",
)
parser.add_argument(
    "source",
    type=RepositorySource.parse,
    help='sources.list entry, e.g. "deb http://deb.debian.org/debian bookworm main"',
)
parser.add_argument(
    "command",
    type=Command,
    choices=list(Command),
    nargs="?",
    default=Command.RELEASE,
    help="release: show the authenticated Release; indexes: also download and verify package indexes",
)
parser.add_argument(
    "-k",
    "--keyring",
    type=Path,
    action="append",
    default=None,
    help="Trusted key file (armored or binary), may be repeated. (default: $APTRELEASE_KEYRINGS)",
    dest="keyrings",
)
parser.add_argument(
    "-a",
    "--arch",
    choices=list_architectures(),
    default=detect_architecture() or "amd64",
    help="Architecture to select package indexes for. (default: host architecture)",
    dest="architecture",
)
parser.add_argument(
    "-o",
    "--out",
    type=Path,
    default=DATA_DIR,
    help="Directory to mirror downloaded indexes into. (default: $APTRELEASE_DATA_DIR)",
    dest="output",
)
parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("gnupg").setLevel(logging.WARNING)


async def run(args, console: Console) -> None:
    source: RepositorySource = args.source
    with Keyring.from_files(*(args.keyrings or DEFAULT_KEYRINGS)) as keyring:
        client = ArchiveClient(keyring, architecture=args.architecture)
        release = await client.get_release(source)

        fields = release.read_fields()
        file_table = release.read_file_table()
        table = Table(title=f"{source.distribution} ({release.form.value}, signed by {release.signer.fingerprint})")
        table.add_column("Field")
        table.add_column("Value")
        for name in SUMMARY_FIELDS:
            if name in fields:
                table.add_row(name, fields[name])
        table.add_row("Files", str(len(file_table)))
        console.print(table)

        if args.command != Command.INDEXES:
            return

        counts = Table(title="Verified indexes")
        counts.add_column("Index")
        counts.add_column("Algorithm")
        counts.add_column("Entries", justify="right")
        for index_file in client.get_package_indexes(source, release):
            output_path = mirror_path(index_file.url, args.output)
            local_path = await download_index(index_file, client.transport, output_path)
            n_entries = sum(1 for _ in iter_index_entries(local_path))
            counts.add_row(index_file.path, index_file.record.algorithm.name, str(n_entries))
        console.print(counts)


def main() -> None:
    args = parser.parse_args()
    setup_logging(args.verbose)
    try:
        asyncio.run(run(args, Console()))
    except (AptReleaseError, OSError, UnicodeDecodeError) as e:
        logger.error(str(e))
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
