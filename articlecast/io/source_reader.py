"""Source document loading.

Responsibilities:
- Read article text from plain-text or markdown files.
- Extract text from text-based PDFs with `pypdf`.
"""

from __future__ import annotations

from pathlib import Path

from pypdf import PdfReader

from ..models.datatypes import SourceDocument


class SourceReadError(RuntimeError):
    """Raised when a source document cannot be loaded."""


_TEXT_SUFFIXES = frozenset({".txt", ".md", ".markdown", ".text"})


class SourceReader:
    """Load a `SourceDocument` from a local file."""

    def read(self, path: Path) -> SourceDocument:
        """Read a source file and reject inputs with no words."""

        if not path.exists():
            raise SourceReadError(f"Source file not found: {path}")

        suffix = path.suffix.lower()
        if suffix == ".pdf":
            text = self._extract_pdf_text(path)
        elif suffix in _TEXT_SUFFIXES or not suffix:
            text = path.read_text(encoding="utf-8")
        else:
            raise SourceReadError(
                f"Unsupported source file type `{suffix}`. Use .txt, .md, or .pdf input."
            )

        document = SourceDocument.from_text(text.strip())
        if document.word_count == 0:
            raise SourceReadError(f"No readable text found in source file: {path}")
        return document

    def _extract_pdf_text(self, path: Path) -> str:
        """Extract page texts with `pypdf`, separated by blank lines."""

        reader = PdfReader(str(path))
        pages: list[str] = []
        for page in reader.pages:
            extracted_text = page.extract_text()
            pages.append((extracted_text or "").replace("\f", "\n").strip())
        return "\n\n".join(page for page in pages if page)
