"""
Text extraction for uploaded PDF and Word documents.

PDFs go through OpenDataLoader's markdown export; Word documents go through
mammoth's raw text conversion (one paragraph per block, blank-line separated).
Extraction never fails the upload: on error the content is empty and the
title falls back to the file name.
"""

import io
import logging
import os
import tempfile
from typing import NamedTuple, Optional

import mammoth
from opendataloader_pdf import convert

from app.models.document import DocumentType

logger = logging.getLogger(__name__)


class ExtractedText(NamedTuple):
    content: str
    title: Optional[str]


def extract_pdf_text(content: bytes) -> str:
    """
    Convert PDF bytes to markdown text using OpenDataLoader.

    Raises:
        ValueError: If the PDF cannot be processed
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        input_path = os.path.join(temp_dir, "upload.pdf")
        with open(input_path, "wb") as f:
            f.write(content)

        output_dir = os.path.join(temp_dir, "out")
        os.makedirs(output_dir, exist_ok=True)

        try:
            convert(
                input_path=input_path,
                output_dir=output_dir,
                format="markdown",
                quiet=True
            )
        except Exception as e:
            raise ValueError(f"Failed to extract PDF text: {str(e)}") from e

        markdown_path = os.path.join(output_dir, "upload.md")
        if not os.path.exists(markdown_path):
            return ""
        with open(markdown_path, "r", encoding="utf-8") as f:
            return f.read()


def extract_word_text(content: bytes) -> str:
    """
    Read the raw text of a .docx file with mammoth.

    Raises:
        ValueError: If mammoth cannot read the document
    """
    try:
        result = mammoth.extract_raw_text(io.BytesIO(content))
    except Exception as e:
        raise ValueError(f"Failed to read Word document: {str(e)}") from e

    for message in result.messages:
        logger.debug(f"mammoth: {message.message}")

    return result.value or ""


def first_non_blank_line(text: str) -> Optional[str]:
    for line in text.split("\n"):
        if line.strip():
            return line
    return None


def extract_text(content: bytes, doc_type: DocumentType, filename: str) -> ExtractedText:
    """
    Extract searchable text and a title from a document.

    Args:
        content: Raw file bytes
        doc_type: 'pdf' or 'word'
        filename: Original file name, used as the fallback title

    Returns:
        ExtractedText with content (possibly empty) and title
    """
    try:
        if doc_type == "pdf":
            return ExtractedText(content=extract_pdf_text(content), title=filename)

        text = extract_word_text(content)
        return ExtractedText(content=text, title=first_non_blank_line(text) or filename)
    except Exception as e:
        logger.warning(f"Text extraction failed for {filename}: {e}")
        return ExtractedText(content="", title=filename)
