"""
app/services/artist_csv_parser.py

Extract artist names from an uploaded CSV file.
"""

from __future__ import annotations

import csv
import io
import re

_ARTIST_COLUMN_PATTERN = re.compile(r"^(artist|artists|name|band)$", re.IGNORECASE)


class ArtistCSVError(ValueError):
    """
    Raised when the uploaded content cannot be decoded as text.
    """


def parse_artist_csv(content: bytes | str) -> list[str]:
    """
    Return artist names from CSV content, in file order.

    The first column named artist/artists/name/band is used, otherwise the
    first column. A file with a header but no data rows is read as a plain
    list with one artist per line.
    """

    text = _decode(content)
    reader = csv.DictReader(io.StringIO(text, newline=""), skipinitialspace=True)
    headers = reader.fieldnames or []
    if not headers:
        return []

    rows = [
        row
        for row in reader
        if any(isinstance(value, str) and value.strip() for value in row.values())
    ]
    if not rows:
        return [line.strip() for line in text.splitlines() if line.strip()]

    artist_key = next(
        (header for header in headers if _ARTIST_COLUMN_PATTERN.match(header.strip())),
        headers[0],
    )

    artists: list[str] = []
    for row in rows:
        value = row.get(artist_key)
        if isinstance(value, str) and value.strip():
            artists.append(value.strip())
    return artists


def _decode(content: bytes | str) -> str:
    if isinstance(content, str):
        return content.lstrip("\ufeff")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ArtistCSVError("CSV file must be UTF-8 encoded.") from exc
