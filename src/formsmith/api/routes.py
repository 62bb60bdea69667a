"""API routes for formsmith."""

import logging
from typing import Any, Union
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ..config import Settings
from ..documents import DocumentGenerator, TemplateLoadError, UnresolvedPlaceholdersError
from ..placeholders import (
    IllegalCharacterInValue,
    MarkupParseError,
    PlaceholderParser,
    PlaceholderResolver,
    TypedValue,
    ValueFormatter,
    get_dialect,
)
from ..registry import DocumentRegistry, DocumentTypeNotFoundError, FormValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


def content_disposition(filename: str) -> str:
    """Build an attachment header that survives non-ASCII document names."""
    fallback = filename.encode("ascii", "ignore").decode("ascii") or "document.docx"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def get_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_registry(request: Request) -> DocumentRegistry:
    """Get the application's document registry."""
    return request.app.state.registry


def get_generator(request: Request) -> DocumentGenerator:
    """Get the application's document generator."""
    return request.app.state.generator


class FormDataRequest(BaseModel):
    """Submitted form values keyed by field key."""

    values: dict[str, Any] = Field(default_factory=dict)


class PlaceholderParseRequest(BaseModel):
    """Request to find placeholders in raw markup."""

    text: str
    dialect: str = "xml"


class PlaceholderResolveRequest(BaseModel):
    """Request to resolve placeholders in raw markup."""

    text: str
    bindings: dict[str, Union[TypedValue, str]] = Field(default_factory=dict)
    dialect: str = "xml"


# Health check


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_settings),
    registry: DocumentRegistry = Depends(get_registry),
):
    """Health check endpoint with diagnostics."""
    config = {
        "templates_dir": str(settings.templates_dir),
        "templates_dir_exists": settings.templates_dir.is_dir(),
        "document_types": len(registry),
        "currency_grouping": settings.currency_grouping,
        "strict_placeholders": settings.strict_placeholders,
    }

    return {
        "status": "ok",
        "service": "formsmith",
        "config": config,
    }


# Document type endpoints


@router.get("/documents")
async def list_documents(registry: DocumentRegistry = Depends(get_registry)):
    """List the document types that can be generated."""
    return {
        "documents": [
            {"key": key, "name": doc.name, "description": doc.description}
            for key, doc in registry.items()
        ]
    }


@router.get("/documents/{key}")
async def get_document(key: str, generator: DocumentGenerator = Depends(get_generator)):
    """
    Get a document type's form schema.

    Fields are grouped and the groups ordered for display.
    """
    try:
        document_type = generator.registry.get(key)
    except DocumentTypeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "key": key,
        "name": document_type.name,
        "description": document_type.description,
        "template_available": generator.template_available(key),
        "groups": [
            {
                "key": group_key,
                "name": group.name,
                "order": group.order,
                "fields": [{"key": field_key, **spec.model_dump()} for field_key, spec in fields],
            }
            for group_key, group, fields in document_type.grouped_fields()
        ],
    }


@router.get("/documents/{key}/template")
async def check_template(key: str, generator: DocumentGenerator = Depends(get_generator)):
    """Compare the template's placeholders with the document type's fields."""
    try:
        check = generator.inspect_template(key)
    except (DocumentTypeNotFoundError, FileNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (TemplateLoadError, MarkupParseError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {**check.model_dump(), "valid": check.valid}


@router.post("/documents/{key}/validate")
async def validate_document(
    key: str,
    request: FormDataRequest,
    generator: DocumentGenerator = Depends(get_generator),
):
    """Validate form values without generating anything."""
    try:
        result = generator.validate(key, request.values)
    except DocumentTypeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return result.model_dump()


@router.post("/documents/{key}/generate")
async def generate_document(
    key: str,
    request: FormDataRequest,
    generator: DocumentGenerator = Depends(get_generator),
):
    """
    Generate a filled document for download.

    Returns:
    - The DOCX file as an attachment
    - X-Unresolved-Placeholders header listing template placeholders with no value
    """
    try:
        document = generator.generate(key, request.values)
    except (DocumentTypeNotFoundError, FileNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FormValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={
                "error": "validation_failed",
                "message": str(e),
                "errors": [error.model_dump() for error in e.result.errors],
            },
        )
    except UnresolvedPlaceholdersError as e:
        raise HTTPException(
            status_code=409,
            detail={"error": "unresolved_placeholders", "message": str(e), "names": e.names},
        )
    except (TemplateLoadError, MarkupParseError, IllegalCharacterInValue) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": content_disposition(document.filename),
            "X-Unresolved-Placeholders": ",".join(document.unresolved),
        },
    )


# Placeholder endpoints


@router.post("/placeholders/parse")
async def parse_placeholders(request: PlaceholderParseRequest):
    """
    Find placeholders in raw markup.

    Returns:
    - List of placeholders, reassembled across markup
    """
    try:
        parser = PlaceholderParser(get_dialect(request.dialect))
        placeholders = parser.extract_placeholders(request.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "placeholders": [
            {
                "name": p.name,
                "syntax": p.syntax,
                "source": p.source,
                "fragmented": p.fragmented,
            }
            for p in placeholders
        ],
    }


@router.post("/placeholders/resolve")
async def resolve_placeholders(
    request: PlaceholderResolveRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Resolve placeholders in raw markup.

    Returns:
    - Resolved markup
    - Names substituted and names left unresolved
    """
    try:
        resolver = PlaceholderResolver(
            dialect=get_dialect(request.dialect),
            formatter=ValueFormatter(grouping=settings.currency_grouping),
        )
        document = resolver.resolve_document(request.text, request.bindings)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "text": document.text,
        "resolved": document.resolved,
        "unresolved": document.unresolved,
    }
