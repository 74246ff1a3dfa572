from obrador.documents.content import (
    DocumentContent,
    DocumentKind,
    LineKind,
    PrintableLine,
    build_document_content,
)
from obrador.documents.locales import Locale

__all__ = [
    "DocumentContent",
    "DocumentKind",
    "LineKind",
    "Locale",
    "PrintableLine",
    "build_document_content",
]
