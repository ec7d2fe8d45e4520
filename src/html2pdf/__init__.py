"""
Convert HTML to PDF by driving headless Chromium over the DevTools protocol.
"""
from .cancel import CancelToken
from .converter import (
    HtmlToPdfConverter,
    convert_html_file_to_pdf,
    convert_html_to_pdf,
    read_html_file,
)
from .errors import (
    ConversionCancelled,
    ConversionError,
    Html2PdfError,
    HtmlFileNotFound,
    HtmlFileReadError,
    Phase,
)
from .options import (
    ConversionOptions,
    apply_options,
    default_logger,
    with_logger,
    with_print_background,
)

__version__ = "0.1.0"
