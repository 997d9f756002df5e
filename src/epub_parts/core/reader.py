"""Access to the entries of an EPUB zip archive."""

import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO
from urllib.parse import unquote

from bs4.dammit import EncodingDetector, UnicodeDammit

from epub_parts.config import ParseConfig
from epub_parts.core.exceptions import (
    EmptyArchiveError,
    EntryNotFoundError,
    EpubError,
    MIMEError,
)

log = logging.getLogger(__name__)

# Strings that must be matched as the archive is opened
MIME = "application/epub+zip"
MIMETYPE_ENTRY = "mimetype"
CONTAINER_ENTRY = "meta-inf/container.xml"
OEBPS_MEDIA_TYPE = "application/oebps-package+xml"

EpubSource = str | Path | bytes | BinaryIO


@dataclass
class LoadedEntry:
    """An archive entry together with its decoded data."""

    entry: zipfile.ZipInfo
    data: str | bytes


class Reader:
    """Look up and decode entries of an EPUB archive."""

    def __init__(self, source: EpubSource, config: ParseConfig | None = None):
        self.config = config or ParseConfig()
        self.entries: list[zipfile.ZipInfo] = []
        self.container: LoadedEntry | None = None

        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(source)
        try:
            self._zip = zipfile.ZipFile(source)
        except zipfile.BadZipFile as e:
            raise EpubError(f"Not a zip archive: {e}") from e

    def open(self) -> "Reader":
        """List the entries, check the mime type and load the container."""
        self.entries = self._zip.infolist()
        if not self.entries:
            raise EmptyArchiveError("Empty archive!")

        if self.config.check_mimetype:
            self.check_mime_type()
        else:
            log.debug("Skipping mimetype check")

        self.container = self.read(CONTAINER_ENTRY)
        return self

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "Reader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def check_mime_type(self) -> None:
        """Require the ``mimetype`` entry to read exactly ``application/epub+zip``."""
        data = self.read(MIMETYPE_ENTRY).data
        MIMEError.unless(id=MIMETYPE_ENTRY, actual=str(data).strip(), expected=MIME)

    def read(self, name: str, media_type: str | None = None) -> LoadedEntry:
        """Find an entry by name and decode it.

        Images are returned as bytes, everything else as text. A byte order
        mark or an XML encoding declaration takes precedence over
        ``ParseConfig.encoding``.
        """
        loaded = self.read_raw(name)
        if media_type and "image/" in media_type:
            return loaded

        return LoadedEntry(entry=loaded.entry, data=self.decode(loaded.data))

    def read_raw(self, name: str) -> LoadedEntry:
        """Find an entry by name and return its bytes untouched."""
        entry = self.partial_search(name)
        return LoadedEntry(entry=entry, data=self._zip.read(entry))

    def decode(self, raw: bytes) -> str:
        declared = EncodingDetector.find_declared_encoding(raw)
        dammit = UnicodeDammit(
            raw,
            known_definite_encodings=[declared] if declared else [],
            user_encodings=[self.config.encoding],
        )
        if dammit.unicode_markup is None:
            log.warning(f"Could not detect encoding, decoding as {self.config.encoding}")
            text = raw.decode(self.config.encoding, errors="replace")
        else:
            text = dammit.unicode_markup
        return text.lstrip("\ufeff")

    def partial_search(self, name: str) -> zipfile.ZipInfo:
        """Find an entry by exact, trailing or partial path match.

        Matching ignores case, a leading ``/`` and percent-encoding.
        """
        wanted = unquote(name[1:] if name.startswith("/") else name).lower()
        files = [entry for entry in self.entries if not entry.is_dir()]

        for entry in files:
            if entry.filename.lower() == wanted:
                return entry

        if wanted:
            for entry in files:
                if entry.filename.lower().endswith("/" + wanted):
                    return entry

            for entry in files:
                filename = entry.filename.lower()
                if wanted in filename or filename in wanted:
                    log.debug(f"Partial match for {name}: {entry.filename}")
                    return entry

        raise EntryNotFoundError(name)

    def namelist(self) -> list[str]:
        return [entry.filename for entry in self.entries]


def read_archive(source: EpubSource, config: ParseConfig | None = None) -> Reader:
    """Open ``source`` and return a ready to use ``Reader``."""
    return Reader(source, config).open()
