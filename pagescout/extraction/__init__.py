"""Content extraction modules."""

from pagescout.extraction.base import DomSnapshot, Extractor
from pagescout.extraction.detectors import detect_structure_type
from pagescout.extraction.ensemble import EXTRACTOR_NAMES, ExtractionEnsemble, default_extractors
from pagescout.extraction.metadata import extract_images, extract_metadata, extract_title

__all__ = [
    "DomSnapshot",
    "EXTRACTOR_NAMES",
    "ExtractionEnsemble",
    "Extractor",
    "default_extractors",
    "detect_structure_type",
    "extract_images",
    "extract_metadata",
    "extract_title",
]
