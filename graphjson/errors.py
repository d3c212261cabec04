"""
Exception types raised while loading graph documents.

Detection never raises: a factory that does not recognise a document
returns None from ``match``. Only construction failures surface here.
"""

from __future__ import annotations


class ModelLoadError(Exception):
    """A claimed document could not be turned into a Model."""


class MissingDocumentError(ModelLoadError):
    """A builder was handed no document (a matcher claimed nothing)."""


class UnsupportedModelError(ModelLoadError):
    """No registered format recognises the document."""


__all__ = ["ModelLoadError", "MissingDocumentError", "UnsupportedModelError"]
