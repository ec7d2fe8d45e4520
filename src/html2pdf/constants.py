# src/html2pdf/constants.py
from __future__ import annotations

DEFAULT_TIMEOUT_S = 30

# Baseline document the session is parked on before content is injected.
BLANK_URL = "about:blank"

LOGGER_NAME = "html2pdf"

CHROMIUM_ARGS = [
    "--disable-features=LazyImageLoading,LazyFrameLoading",
]

# CDP method and event names used by the converter.
LOAD_EVENT = "Page.loadEventFired"
GET_FRAME_TREE = "Page.getFrameTree"
SET_DOCUMENT_CONTENT = "Page.setDocumentContent"
PRINT_TO_PDF = "Page.printToPDF"

PDF_MAGIC = b"%PDF"
