"""Plain-text extraction from book uploads."""

import io
import re
import zipfile

from pypdf import PdfReader

from media_verifier.logging import setup_logging

logger = setup_logging()

PDF_MIME_TYPE = "application/pdf"
EPUB_MIME_TYPE = "application/epub+zip"

GENERAL_TEXT_LIMIT = 10_000
MODERATION_TEXT_LIMIT = 5_000
EPUB_MAX_DOCUMENTS = 5

_EPUB_DOCUMENT_SUFFIXES = (".html", ".xhtml", ".htm")
_SCRIPT_BLOCK = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_STYLE_BLOCK = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


class DocumentTextExtractor:
    """Pulls readable text out of PDF and EPUB payloads."""

    def supports(self, mime_type: str) -> bool:
        return mime_type in (PDF_MIME_TYPE, EPUB_MIME_TYPE)

    def extract(self, data: bytes, mime_type: str, limit: int = GENERAL_TEXT_LIMIT) -> str:
        """
        Extracts text from a book file.

        Args:
            data: Raw file bytes.
            mime_type: application/pdf or application/epub+zip.
            limit: Maximum number of characters returned.

        Returns:
            Whitespace-collapsed text, truncated to the limit. Empty when the
            format is unsupported or the file cannot be read.
        """
        try:
            if mime_type == PDF_MIME_TYPE:
                text = self._extract_pdf(data)
            elif mime_type == EPUB_MIME_TYPE:
                text = self._extract_epub(data)
            else:
                logger.warning("Unsupported book file type", extra={"mime_type": mime_type})
                return ""
        except Exception:
            logger.exception(
                "Failed to extract text from document", extra={"mime_type": mime_type}
            )
            return ""

        return _collapse(text)[:limit]

    def _extract_pdf(self, data: bytes) -> str:
        reader = PdfReader(io.BytesIO(data))
        pages = []
        for page in reader.pages:
            pages.append(page.extract_text() or "")
        return "\n".join(pages)

    def _extract_epub(self, data: bytes) -> str:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            documents = [
                info.filename
                for info in archive.infolist()
                if not info.is_dir()
                and info.filename.lower().endswith(_EPUB_DOCUMENT_SUFFIXES)
                and "META-INF" not in info.filename
                and "mimetype" not in info.filename
            ]

            chapters = []
            for name in documents[:EPUB_MAX_DOCUMENTS]:
                try:
                    markup = archive.read(name).decode("utf-8", errors="replace")
                except (KeyError, zipfile.BadZipFile, OSError):
                    logger.warning(
                        "Failed to read EPUB document", extra={"document": name}
                    )
                    continue
                text = self._strip_markup(markup)
                if text:
                    chapters.append(text)
        return "\n".join(chapters)

    @staticmethod
    def _strip_markup(markup: str) -> str:
        markup = _SCRIPT_BLOCK.sub("", markup)
        markup = _STYLE_BLOCK.sub("", markup)
        return _collapse(_TAG.sub(" ", markup))
