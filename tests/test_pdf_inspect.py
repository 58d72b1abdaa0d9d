"""Tests for ielts_coach.tools.pdf_inspect."""
import fitz
import pytest

from ielts_coach.tools.errors import InvalidDocument
from ielts_coach.tools.pdf_inspect import inspect_pdf


def test_counts_pages(pdf_bytes: bytes) -> None:
    assert inspect_pdf(pdf_bytes).num_pages == 1


def test_multi_page() -> None:
    doc = fitz.open()
    for _ in range(3):
        doc.new_page()
    data = doc.tobytes()
    doc.close()
    assert inspect_pdf(data).num_pages == 3


@pytest.mark.parametrize("data", [b"", b"plain text, not a pdf"])
def test_rejects_non_pdf(data: bytes) -> None:
    with pytest.raises(InvalidDocument):
        inspect_pdf(data)
