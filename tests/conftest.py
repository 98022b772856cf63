"""Pytest fixtures for pdf-tilecut tests."""

import fitz  # PyMuPDF
import pytest

from schemas.options import build_options
from schemas.page import Page, Rect

# Two pages: page 1 is 600 x 900 pt with a single content reference, page 2
# has a crop box smaller than its media box and a content array.
SAMPLE_QDF = """%PDF-1.3
%\xbf\xf7\xa2\xfe
%QDF-1.0

%% Original object ID: 1 0
1 0 obj
<<
  /Pages 2 0 R
  /Type /Catalog
>>
endobj

%% Original object ID: 2 0
2 0 obj
<<
  /Count 2
  /Kids [
    3 0 R
    4 0 R
  ]
  /Type /Pages
>>
endobj

%% Page 1
%% Original object ID: 3 0
3 0 obj
<<
  /Contents 5 0 R
  /MediaBox [
    0
    0
    600
    900
  ]
  /Parent 2 0 R
  /Resources <<
    /Font <<
      /F1 7 0 R
    >>
  >>
  /Type /Page
>>
endobj

%% Page 2
%% Original object ID: 4 0
4 0 obj
<<
  /Contents [
    8 0 R
  ]
  /CropBox [
    10
    10
    300
    400
  ]
  /MediaBox [
    0
    0
    310
    410
  ]
  /Parent 2 0 R
  /Resources <<
  >>
  /Rotate 0
  /Type /Page
>>
endobj

%% Contents for page 1
%% Original object ID: 5 0
5 0 obj
<<
  /Length 6 0 R
>>
stream
BT /F1 12 Tf 72 720 Td (Hello) Tj ET
endstream
endobj

6 0 obj
36
endobj

%% Original object ID: 7 0
7 0 obj
<<
  /BaseFont /Helvetica
  /Subtype /Type1
  /Type /Font
>>
endobj

%% Contents for page 2
%% Original object ID: 8 0
8 0 obj
<<
  /Length 9 0 R
>>
stream
0 0 m 100 100 l S
endstream
endobj

9 0 obj
17
endobj

xref
0 10
0000000000 65535 f
0000000052 00000 n
0000000133 00000 n
0000000242 00000 n
0000000507 00000 n
0000000789 00000 n
0000000908 00000 n
0000000927 00000 n
0000001049 00000 n
0000001149 00000 n
trailer <<
  /Root 1 0 R
  /Size 10
  /ID [<31415926535897932384626433832795><31415926535897932384626433832795>]
>>
startxref
1168
%%EOF
"""


@pytest.fixture
def sample_qdf_text():
    """Synthetic QDF document with two pages."""
    return SAMPLE_QDF


@pytest.fixture
def sample_page():
    """A 600 x 900 pt page with all boxes equal to its media box."""
    box = Rect(0, 0, 600, 900)
    return Page(
        number=1,
        media_box=box,
        crop_box=box,
        bleed_box=box,
        trim_box=box,
        content_ids=[5],
        raw="  /Type /Page",
    )


@pytest.fixture
def quarter_options():
    """Options whose tile content size is 560 x 810 pt."""
    return build_options(tile_size="704pt x 954pt", title="SAMPLE")


@pytest.fixture
def sample_pdf(tmp_path):
    """Create a two page 600 x 900 pt PDF with text on each page."""
    pdf_path = tmp_path / "sample.pdf"
    doc = fitz.open()
    for number in range(1, 3):
        page = doc.new_page(width=600, height=900)
        page.insert_text((72, 72), f"Page {number}", fontsize=24)
    doc.save(str(pdf_path))
    doc.close()
    return pdf_path


@pytest.fixture
def indirect_qdf_text(sample_qdf_text):
    """Sample QDF where page 1's media box and page 2's content array are indirect."""
    text = sample_qdf_text.replace(
        "  /MediaBox [\n    0\n    0\n    600\n    900\n  ]\n",
        "  /MediaBox 10 0 R\n",
    )
    text = text.replace("  /Contents [\n    8 0 R\n  ]\n", "  /Contents 11 0 R\n")
    return text.replace(
        "xref\n0 10\n",
        "%% Original object ID: 10 0\n10 0 obj\n[\n  0\n  0\n  600\n  900\n]\nendobj\n\n"
        "%% Original object ID: 11 0\n11 0 obj\n[\n  8 0 R\n]\nendobj\n\n"
        "xref\n0 12\n",
    )
