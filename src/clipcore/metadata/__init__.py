"""
clipcore Metadata Extraction Module

Components:
- MetadataExtractor: combines JSON-LD, <meta> tags and the <title> heuristic
- SchemaOrgParser: schema.org article data in JSON-LD
- get_article_title: title cleanup for the document <title>
"""

from .metadata_extractor import ArticleMetadata, MetadataExtractor, document_title, get_article_title
from .structured_data_parser import JsonLdMetadata, SchemaOrgParser

__all__ = [
    "ArticleMetadata",
    "JsonLdMetadata",
    "MetadataExtractor",
    "SchemaOrgParser",
    "document_title",
    "get_article_title",
]
