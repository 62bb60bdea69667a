"""Registry of fillable document types."""

import json
import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Union

from pydantic import ValidationError

from .defaults import BUILTIN_DOCUMENT_TYPES
from .models import DocumentType, DocumentTypeNotFoundError

logger = logging.getLogger(__name__)


class DocumentRegistry:
    """
    Mapping from document-type key to its declared schema.

    Built once at startup and handed to whichever component needs it.
    """

    def __init__(self, document_types: Optional[Mapping[str, Union[DocumentType, dict]]] = None):
        self._types: dict[str, DocumentType] = {}
        for key, config in (document_types or {}).items():
            self.register(key, config)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "DocumentRegistry":
        """
        Load a registry from a JSON file.

        The file holds an object keyed by document-type key, each value
        shaped like DocumentType.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not valid JSON or a type is invalid
        """
        path = Path(path)
        try:
            data: Any = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Registry file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Registry file {path} must contain an object of document types")

        registry = cls(data)
        logger.info(f"Loaded {len(registry)} document types from {path}")
        return registry

    def register(self, key: str, config: Union[DocumentType, dict]) -> DocumentType:
        """
        Add a document type, replacing any existing one with the same key.

        Raises:
            ValueError: If the configuration is not a valid DocumentType
        """
        if isinstance(config, DocumentType):
            document_type = config
        else:
            try:
                document_type = DocumentType.model_validate(config)
            except ValidationError as e:
                raise ValueError(f"Invalid configuration for document type '{key}': {e}") from e

        if key in self._types:
            logger.warning(f"Document type '{key}' already exists. Overwriting.")
        self._types[key] = document_type
        logger.debug(f"Registered document type '{key}' ({len(document_type.fields)} fields)")
        return document_type

    def get(self, key: str) -> DocumentType:
        """
        Get a document type by key.

        Raises:
            DocumentTypeNotFoundError: If the key is not registered
        """
        try:
            return self._types[key]
        except KeyError:
            raise DocumentTypeNotFoundError(key)

    def keys(self) -> list[str]:
        return list(self._types)

    def items(self) -> list[tuple[str, DocumentType]]:
        return list(self._types.items())

    def __contains__(self, key: object) -> bool:
        return key in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)


def default_registry() -> DocumentRegistry:
    """Create a registry holding the built-in document types."""
    return DocumentRegistry(BUILTIN_DOCUMENT_TYPES)


def load_registry(registry_path: Optional[Path] = None) -> DocumentRegistry:
    """Load the registry from a JSON file if given, else the built-in types."""
    if registry_path is not None:
        return DocumentRegistry.from_file(registry_path)
    return default_registry()
