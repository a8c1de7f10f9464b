"""
Article metadata: structured data, authors, publication dates.
"""

from .author_extractor import AuthorExtractor, clean_author_name
from .date_extractor import DateExtractor
from .metadata_extractor import MetadataExtractor, MetadataResult, normalize_language
from .structured_data_parser import StructuredData, StructuredDataParser

__all__ = [
    "AuthorExtractor",
    "DateExtractor",
    "MetadataExtractor",
    "MetadataResult",
    "StructuredData",
    "StructuredDataParser",
    "clean_author_name",
    "normalize_language",
]
