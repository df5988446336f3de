"""Build-time extraction of custom syntax into a StyleBundle."""

from tpastyle.extraction.bundle import StyleBundle, load_bundle, save_bundle
from tpastyle.extraction.extractor import (
    ExtractionResult,
    Extractor,
    compilation_hash_for,
    extract,
)

__all__ = [
    "ExtractionResult",
    "Extractor",
    "StyleBundle",
    "compilation_hash_for",
    "extract",
    "load_bundle",
    "save_bundle",
]
