from __future__ import annotations

import argparse
from pathlib import Path

from app.dependencies import get_index_writer, get_pipeline
from services.ingestion_service import resolve_stored_ref
from services.intake import build_from_form
from src.config.settings import get_settings
from src.text_indexing.models import SearchFilters
from src.utils.logging import configure_logging


def _ingest(args: argparse.Namespace) -> None:
    path = Path(args.file)
    request = build_from_form(
        file_name=args.name or path.name,
        content=path.read_bytes(),
        project_id=args.project,
        category_id=args.category,
        notes=args.notes,
    )
    outcome = get_pipeline().ingest(request)
    print(f"Stored {outcome.ref.uri}")
    print(f"  stage={outcome.stage.value} extracted={outcome.extracted_characters} indexed={outcome.indexed}")
    for failure in outcome.failures:
        print(f"  [{failure.stage.value}] {failure.reason}")


def _reprocess(args: argparse.Namespace) -> None:
    pipeline = get_pipeline()
    outcome = pipeline.process_stored(resolve_stored_ref(pipeline, args.path), args.notes or None)
    print(f"stage={outcome.stage.value} extracted={outcome.extracted_characters} indexed={outcome.indexed}")
    for failure in outcome.failures:
        print(f"  [{failure.stage.value}] {failure.reason}")


def _search(args: argparse.Namespace) -> None:
    page = get_index_writer().search(args.query, SearchFilters(args.project, args.category), top=args.top)
    print(f"{page.total_count} matches")
    for hit in page.hits:
        print(f"  {hit.score:.3f}  {hit.path}")
        for snippet in hit.highlights or []:
            print(f"      ... {snippet}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Upload, reprocess and search documents from the command line.")
    sub = parser.add_subparsers(dest="command", required=True)

    ingest = sub.add_parser("ingest", help="Store a local file, extract its text and index it")
    ingest.add_argument("file", help="Local file to upload")
    ingest.add_argument("--project", required=True, help="Project id (top-level folder)")
    ingest.add_argument("--name", help="Stored file name (defaults to the local name)")
    ingest.add_argument("--category", default="", help="Category id")
    ingest.add_argument("--notes", default="", help="Free-text notes")
    ingest.set_defaults(func=_ingest)

    reprocess = sub.add_parser("reprocess", help="Re-run extraction and indexing for a stored object URI")
    reprocess.add_argument("path", help="https://<account>.dfs.core.windows.net/<container>/<project>/<file>")
    reprocess.add_argument("--notes", default="", help="Override the stored notes")
    reprocess.set_defaults(func=_reprocess)

    search = sub.add_parser("search", help="Query the search index")
    search.add_argument("query")
    search.add_argument("--project")
    search.add_argument("--category")
    search.add_argument("--top", type=int, default=10)
    search.set_defaults(func=_search)

    args = parser.parse_args()
    configure_logging(get_settings().log_level)
    args.func(args)


if __name__ == "__main__":
    main()
