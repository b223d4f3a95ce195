"""PDF text extraction for the callsign list.

Uses pdfplumber with layout preservation so that column gaps survive as
runs of spaces, which the line parser relies on.
"""

from __future__ import annotations

import io

import pdfplumber


class PdfExtractionError(Exception):
    """Raised when the PDF cannot be read."""


def extract_text_from_pdf(content: bytes) -> str:
    """Return the text layer of all pages joined by newlines."""
    try:
        pages = []
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            for page in pdf.pages:
                text = page.extract_text(layout=True)
                if text and text.strip():
                    pages.append(text)
    except Exception as e:
        raise PdfExtractionError(f"Failed to extract text from PDF: {e}") from e
    return "\n".join(pages)
