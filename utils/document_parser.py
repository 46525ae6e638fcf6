"""Document parser adapter: PDF through pypdf, everything else as text."""

import asyncio
import logging
from pathlib import Path
from typing import List

from pypdf import PdfReader

from agent_kit.errors import ExternalCallFailure
from agent_kit.ports import ParsedDocument


logger = logging.getLogger("DocumentParser")

TEXT_SUFFIXES = {".txt", ".md", ".markdown", ".rst", ".csv", ".json", ".html", ".htm"}


class AutoParser:
    """Pick a parsing strategy from the file suffix."""

    async def parse(self, file_path: str) -> ParsedDocument:
        path = Path(file_path)
        try:
            return await asyncio.to_thread(self._parse_sync, path)
        except ExternalCallFailure:
            raise
        except Exception as exc:
            raise ExternalCallFailure("parser", f"{path.name}: {exc}", exc) from exc

    def _parse_sync(self, path: Path) -> ParsedDocument:
        suffix = path.suffix.lower()
        if suffix == ".pdf":
            return _parse_pdf(path)
        if suffix and suffix not in TEXT_SUFFIXES:
            logger.warning(f"Unknown document type {suffix}, reading {path.name} as text")
        text = path.read_text(encoding = "utf-8", errors = "replace")
        return ParsedDocument(title = path.stem, text = text, pages = [text])


def _parse_pdf(path: Path) -> ParsedDocument:
    reader = PdfReader(str(path))
    pages: List[str] = [(page.extract_text() or "") for page in reader.pages]

    title = path.stem
    metadata = reader.metadata
    if metadata is not None and metadata.title:
        title = str(metadata.title)

    logger.info(f"Parsed {path.name}: {len(pages)} pages")
    return ParsedDocument(title = title, text = "\n\n".join(pages), pages = pages)
