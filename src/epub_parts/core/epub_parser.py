"""EPUB parsing: container, package document and the open sequence."""

import logging
import posixpath
from typing import Any, Mapping

from epub_parts.config import ParseConfig
from epub_parts.core.exceptions import EpubError, MIMEError, MissingRootfileError
from epub_parts.core.flow import parse_flow
from epub_parts.core.manifest import parse_manifest
from epub_parts.core.metadata import parse_metadata
from epub_parts.core.reader import (
    CONTAINER_ENTRY,
    OEBPS_MEDIA_TYPE,
    EpubSource,
    Reader,
)
from epub_parts.core.retriever import Retriever
from epub_parts.core.spine import parse_spine
from epub_parts.core.toc import normalize_href, resolve_toc
from epub_parts.core.xml import attributes_of, to_list, xml_to_dict
from epub_parts.models.epub import Parts
from epub_parts.models.events import Emitter, Listener, ParseEvent, prepare_emit

log = logging.getLogger(__name__)

DEFAULT_VERSION = "2.0"


class EpubParser:
    """Parse EPUB archives and extract their structure."""

    def __init__(self, source: EpubSource, config: ParseConfig | None = None):
        self.config = config or ParseConfig()
        self.reader = Reader(source, self.config)
        self.container: dict[str, Any] = {}
        self.root_path = ""
        self.root_dir = ""
        self.root_xml: dict[str, Any] = {}
        self._opened = False

    def open(self) -> "EpubParser":
        """Read the archive, the container and the package document."""
        self.reader.open()
        self.container = self.parse_container()
        self.root_path = get_root_path(self.container)
        self.root_dir = posixpath.dirname(self.root_path)
        self.root_xml = self.zip2dict(self.root_path)
        self._opened = True
        log.info(f"Opened package document {self.root_path}")
        return self

    def close(self) -> None:
        self.reader.close()

    def __enter__(self) -> "EpubParser":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def parse(self, events: Mapping[ParseEvent | str, Listener] | None = None) -> Parts:
        """Parse the EPUB and return its complete structure."""
        emit = prepare_emit(events)
        if not self._opened:
            self.open()
        emit(ParseEvent.ROOT, self.root_xml)
        return self.parse_root_file(emit)

    def parse_root_file(self, emit: Emitter) -> Parts:
        """Build metadata, manifest, spine, flow and toc in that order."""
        package = self.root_xml.get("package")
        if not isinstance(package, dict):
            raise EpubError(f"{self.root_path} is not a package document")

        version = attributes_of(package).get("version") or DEFAULT_VERSION

        metadata = parse_metadata(package.get("metadata"))
        emit(ParseEvent.METADATA, metadata)

        raw_manifest = package.get("manifest")
        manifest = parse_manifest(
            raw_manifest.get("item") if isinstance(raw_manifest, dict) else None
        )
        emit(ParseEvent.MANIFEST, manifest)

        spine = parse_spine(package.get("spine"), manifest)
        emit(ParseEvent.SPINE, spine)

        flow = parse_flow(spine.contents)
        emit(ParseEvent.FLOW, flow)

        toc, toc_source = resolve_toc(manifest, spine, self)
        emit(ParseEvent.TOC, toc)

        parts = Parts(
            metadata=metadata,
            manifest=manifest,
            spine=spine,
            flow=flow,
            toc=toc,
            toc_source=toc_source,
            version=version,
        )
        log.info(
            f"Parsed EPUB {version}: {len(manifest)} items, "
            f"{len(spine.contents)} spine entries, {len(toc)} chapters from {toc_source.value}"
        )
        emit(ParseEvent.LOADED, parts)
        return parts

    def parse_container(self) -> dict[str, Any]:
        container = self.zip2dict(CONTAINER_ENTRY).get("container")
        return container if isinstance(container, dict) else {}

    def xml_to_dict(self, data: str | bytes) -> dict[str, Any]:
        return xml_to_dict(data, recover=self.config.recover_xml)

    def zip2dict(self, name: str) -> dict[str, Any]:
        """Read an archive entry and convert it to the compact dict form."""
        return self.xml_to_dict(self.reader.read_raw(name).data)

    def resolve(self, href: str) -> str:
        """Archive path of an href relative to the package document."""
        return normalize_href(href, self.root_dir)

    def load_xml(self, href: str) -> dict[str, Any]:
        return self.zip2dict(self.resolve(href))

    def load_text(self, href: str) -> str:
        return str(self.reader.read(self.resolve(href)).data)

    def load_bytes(self, href: str) -> bytes:
        return self.reader.read_raw(self.resolve(href)).data


def get_root_path(container: dict[str, Any]) -> str:
    """Path of the package document declared by the container."""
    rootfiles = container.get("rootfiles")
    candidates = to_list(rootfiles.get("rootfile")) if isinstance(rootfiles, dict) else []
    if not candidates:
        raise MissingRootfileError("No rootfiles found")

    attributes = attributes_of(candidates[0])
    MIMEError.unless(
        id=CONTAINER_ENTRY,
        actual=attributes.get("media-type"),
        expected=OEBPS_MEDIA_TYPE,
    )

    full_path = attributes.get("full-path")
    if not full_path:
        raise MissingRootfileError("Rootfile has no full-path")
    return full_path


def open_epub(
    source: EpubSource,
    events: Mapping[ParseEvent | str, Listener] | None = None,
    config: ParseConfig | None = None,
) -> Retriever:
    """Open an EPUB and return its parts wrapped in a ``Retriever``."""
    parser = EpubParser(source, config)
    try:
        parts = parser.parse(events)
    except BaseException:
        parser.close()
        raise
    return Retriever(parts=parts, parser=parser)
