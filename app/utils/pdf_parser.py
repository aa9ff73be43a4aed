# app/utils/pdf_parser.py
import fitz  # PyMuPDF

PDF_MAGIC = b"%PDF-"


def count_pdf_pages(pdf_bytes: bytes) -> int:
    """
    Open PDF bytes with PyMuPDF and return the page count.

    Returns 0 for anything that is not a readable PDF.
    """
    if not pdf_bytes or not pdf_bytes.lstrip()[:5] == PDF_MAGIC:
        return 0

    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except (RuntimeError, ValueError):
        return 0
    try:
        return doc.page_count if doc.is_pdf else 0
    finally:
        doc.close()


def is_pdf(pdf_bytes: bytes) -> bool:
    return count_pdf_pages(pdf_bytes) > 0
