"""Parser for the "Name: value" field syntax used by Release and index files."""

import re

from aptrelease.errors import MalformedFields

# printable US-ASCII except space and colon, not starting with "#" or "-"
_FIELD_NAME = re.compile(r"^[!-\"$-,.-9;-~][!-9;-~]*$")


def canonical_field_name(name: str) -> str:
    """Return the canonical capitalization of a field name.

    The first letter and any letter following a hyphen are upper-cased, the rest
    lower-cased, so "MD5Sum" becomes "Md5sum" and "description-md5" becomes
    "Description-Md5". Names that are not valid field names are returned unchanged.
    """
    if not _FIELD_NAME.match(name):
        return name
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


class FieldTable(dict[str, str]):
    """Ordered mapping of canonical field name to folded value.

    Lookups accept any capitalization of the field name.
    """

    def __getitem__(self, key: str) -> str:
        return super().__getitem__(canonical_field_name(key))

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            key = canonical_field_name(key)
        return super().__contains__(key)

    def get(self, key: str, default=None):
        return super().get(canonical_field_name(key), default)


def read_fields(data: bytes) -> FieldTable:
    """Parse the first paragraph of data into a FieldTable.

    A field starts with "Name:" at the beginning of a line; following lines that
    start with a space or tab continue it. Continuation lines are stripped and
    joined to the value with a single space. Parsing stops at the first blank line
    or at the end of input, which finalizes the current field.

    Args:
        data: Raw (already authenticated) file contents

    Returns:
        The parsed fields, in file order

    Raises:
        MalformedFields: on a leading continuation line, a line without a colon,
            an invalid or repeated field name, or a line that is not UTF-8
    """
    fields = FieldTable()
    current: str | None = None
    parts: list[str] = []

    def finish():
        if current is not None:
            fields[current] = " ".join(p for p in parts if p)

    for line_number, raw_line in enumerate(data.split(b"\n"), start=1):
        try:
            line = raw_line.decode("utf-8").rstrip("\r")
        except UnicodeDecodeError as e:
            raise MalformedFields(line_number, f"invalid UTF-8: {e}") from e

        if not line.strip():
            if current is None:
                continue
            break

        if line[0] in " \t":
            if current is None:
                raise MalformedFields(line_number, "continuation line without a preceding field")
            parts.append(line.strip())
            continue

        name, sep, value = line.partition(":")
        if not sep:
            raise MalformedFields(line_number, f"expected 'Name: value', got {line!r}")
        if not _FIELD_NAME.match(name):
            raise MalformedFields(line_number, f"invalid field name {name!r}")

        finish()
        current = canonical_field_name(name)
        if current in fields:
            raise MalformedFields(line_number, f"repeated field {current!r}")
        parts = [value.strip()]

    finish()
    return fields
