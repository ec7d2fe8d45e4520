"""
End-to-end conversions against a real headless Chromium. Skipped unless
``playwright install chromium`` has been run.
"""
import asyncio
from pathlib import Path

import pytest

from html2pdf import (
    CancelToken,
    ConversionCancelled,
    HtmlFileNotFound,
    convert_html_file_to_pdf,
    convert_html_to_pdf,
    with_logger,
)
from html2pdf import sync_api

pytestmark = pytest.mark.browser


def _chromium_installed() -> bool:
    from playwright.sync_api import sync_playwright

    try:
        with sync_playwright() as p:
            return Path(p.chromium.executable_path).exists()
    except Exception:
        return False


@pytest.fixture(scope="module", autouse=True)
def chromium():
    if not _chromium_installed():
        pytest.skip("Chromium for Playwright is not installed")


@pytest.mark.parametrize(
    "html",
    [
        "<html><body><h1>Hello World</h1></body></html>",
        "<html><head><style>body{font-family:Arial;}</style></head>"
        "<body><h1>Test</h1><p>This is a test.</p></body></html>",
        "",
    ],
)
def test_convert_html_to_pdf(html):
    pdf = asyncio.run(convert_html_to_pdf(html, token=CancelToken(30)))

    assert pdf.startswith(b"%PDF")


def test_convert_with_silent_logger():
    pdf = sync_api.convert_html_to_pdf(
        "<html><body><h1>Test with Logger</h1></body></html>",
        with_logger(None),
        timeout=30,
    )

    assert pdf.startswith(b"%PDF")


def test_convert_file(html_file):
    pdf = asyncio.run(convert_html_file_to_pdf(html_file, token=CancelToken(30)))

    assert pdf.startswith(b"%PDF")


def test_convert_missing_file():
    with pytest.raises(HtmlFileNotFound):
        sync_api.convert_html_file_to_pdf("non-existent-file.html", timeout=30)


def test_tiny_timeout_fails():
    with pytest.raises(ConversionCancelled):
        sync_api.convert_html_to_pdf("<p>timeout</p>", timeout=0.001)
