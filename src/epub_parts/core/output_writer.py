"""Write table of contents chapters to an output directory."""

from datetime import datetime
from pathlib import Path

from epub_parts.core.content_processor import ContentProcessor, OutputFormat
from epub_parts.core.retriever import Retriever
from epub_parts.models.epub import Chapter
from epub_parts.models.output import BookOutput, ChapterMetadata, ChapterOutput


class OutputWriter:
    """Write extracted chapters as JSON files."""

    def __init__(self, output_dir: Path, source_path: Path):
        """Initialize output writer.

        Args:
            output_dir: Directory to write output files
            source_path: Path to the EPUB the chapters come from
        """
        self.output_dir = output_dir
        self.source_path = source_path
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.processor = ContentProcessor()

    def write_chapter(
        self,
        epub: Retriever,
        chapter: Chapter,
        output_format: OutputFormat = "markdown",
    ) -> tuple[Path, ChapterMetadata]:
        """Render one chapter and write it to ``chapter_NNN.json``."""
        content = self.processor.process(epub.get_content(chapter.id), output_format)
        stats = self.processor.get_stats(content)

        metadata = ChapterMetadata(
            chapter_id=chapter.id,
            order=chapter.order,
            title=chapter.title,
            level=chapter.level,
            source_file=chapter.href or "",
            source_path=str(self.source_path),
            extracted_at=datetime.now(),
            word_count=stats["word_count"],
            character_count=stats["character_count"],
            paragraph_count=stats["paragraph_count"],
        )

        output = ChapterOutput(metadata=metadata, content=content, format=output_format)

        filepath = self.output_dir / f"chapter_{chapter.order + 1:03d}.json"
        filepath.write_text(output.model_dump_json(indent=2))

        return filepath, metadata

    def write_manifest(
        self,
        epub: Retriever,
        chapter_metadata: list[ChapterMetadata],
    ) -> Path:
        """Write ``manifest.json`` describing the extraction."""
        parts = epub.parts
        manifest = BookOutput(
            book_title=parts.metadata.title,
            authors=parts.metadata.authors,
            version=parts.version,
            toc_source=parts.toc_source.value if parts.toc_source else "",
            total_chapters=len(parts.toc),
            extracted_chapters=[m.chapter_id for m in chapter_metadata],
            output_directory=str(self.output_dir),
            created_at=datetime.now(),
            chapters=chapter_metadata,
        )

        filepath = self.output_dir / "manifest.json"
        filepath.write_text(manifest.model_dump_json(indent=2))
        return filepath
