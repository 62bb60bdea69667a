"""Command-line interface for formsmith."""

import argparse
import json
import logging
import sys
from pathlib import Path

import uvicorn

from .config import settings


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="formsmith - Fill GST document templates from form data"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # List command
    subparsers.add_parser("list", help="List the registered document types")

    # Inspect command
    inspect_parser = subparsers.add_parser(
        "inspect", help="Compare a template's placeholders with its fields"
    )
    inspect_parser.add_argument("key", help="Document type key (e.g. DRC-13)")

    # Fill command
    fill_parser = subparsers.add_parser("fill", help="Generate a document from a JSON file of values")
    fill_parser.add_argument("key", help="Document type key (e.g. DRC-13)")
    fill_parser.add_argument(
        "--data", "-d", required=True, type=Path, help="JSON file with field values"
    )
    fill_parser.add_argument(
        "--output", "-o", type=Path, help="Output path (default: generated name in the current directory)"
    )
    fill_parser.add_argument(
        "--strict", action="store_true", help="Fail if any placeholder is left unresolved"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "list":
        sys.exit(run_list())
    elif args.command == "inspect":
        sys.exit(run_inspect(args.key))
    elif args.command == "fill":
        sys.exit(run_fill(args.key, args.data, args.output, args.strict))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "formsmith.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
        log_level=settings.log_level.lower(),
    )


def _generator(strict: bool = False):
    from .documents import DocumentGenerator
    from .registry import load_registry

    active = settings.model_copy(update={"strict_placeholders": True}) if strict else settings
    return DocumentGenerator(registry=load_registry(active.registry_path), settings=active)


def run_list() -> int:
    """Print the registered document types."""
    generator = _generator()
    for key, document_type in generator.registry.items():
        marker = "" if generator.template_available(key) else "  (template missing)"
        print(f"{key:<12} {document_type.name}{marker}")
        if document_type.description:
            print(f"{'':<12} {document_type.description}")
    return 0


def run_inspect(key: str) -> int:
    """Print how a template's placeholders line up with its fields."""
    from .documents import TemplateLoadError
    from .placeholders import MarkupParseError
    from .registry import DocumentTypeNotFoundError

    generator = _generator()
    try:
        check = generator.inspect_template(key)
    except (DocumentTypeNotFoundError, FileNotFoundError, TemplateLoadError, MarkupParseError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Placeholders: {', '.join(check.placeholders) or '(none)'}")
    if check.fragmented:
        print(f"Split across runs: {', '.join(check.fragmented)}")
    if check.missing:
        print(f"Fields not used by the template: {', '.join(check.missing)}")
    if check.unknown:
        print(f"Placeholders with no field: {', '.join(check.unknown)}")
    return 0 if check.valid else 2


def run_fill(key: str, data_path: Path, output: Path = None, strict: bool = False) -> int:
    """Generate a document from a JSON file of field values."""
    from .documents import TemplateLoadError, UnresolvedPlaceholdersError
    from .placeholders import IllegalCharacterInValue, MarkupParseError
    from .registry import DocumentTypeNotFoundError, FormValidationError

    try:
        form_data = json.loads(data_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: could not read {data_path}: {e}", file=sys.stderr)
        return 1
    if not isinstance(form_data, dict):
        print(f"Error: {data_path} must contain a JSON object", file=sys.stderr)
        return 1

    generator = _generator(strict)
    try:
        document = generator.generate(key, form_data)
    except FormValidationError as e:
        for error in e.result.errors:
            print(f"{error.field}: {error.message}", file=sys.stderr)
        return 1
    except (
        DocumentTypeNotFoundError,
        FileNotFoundError,
        TemplateLoadError,
        MarkupParseError,
        IllegalCharacterInValue,
        UnresolvedPlaceholdersError,
    ) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    target = output or Path(document.filename)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(document.content)
    print(f"Document written to {target}")
    if document.unresolved:
        print(f"Warning: unresolved placeholders: {', '.join(document.unresolved)}")
    return 0


if __name__ == "__main__":
    main()
