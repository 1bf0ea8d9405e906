import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

from app.auth.static_provider import StaticCredentialProvider
from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.documents.models import Document
from app.lifecycle.controller import DocumentsController, build_controller
from app.logging.logger import Log


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="statements", description="Bank statement documents")
    parser.add_argument("--owner", help="owner id (defaults to OWNER_ID)")
    parser.add_argument("--token", help="bearer token (defaults to ACCESS_TOKEN)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list documents, newest first")
    upload = sub.add_parser("upload", help="upload a PDF or CSV statement")
    upload.add_argument("path", type=Path)
    analyze = sub.add_parser("analyze", help="request (re)analysis of a document")
    analyze.add_argument("document_id")
    view = sub.add_parser("view", help="render a document")
    view.add_argument("document_id")
    delete = sub.add_parser("delete", help="delete a document")
    delete.add_argument("document_id")
    delete.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    sub.add_parser("watch", help="poll until no document is pending or processing")
    return parser


def format_document(document: Document) -> str:
    line = (
        f"{document.id}  {document.status.label:<10}  "
        f"{document.upload_timestamp:%Y-%m-%d}  {document.file_name}"
    )
    if document.error_message:
        line += f"  ({document.error_message})"
    result = document.analysis_result
    if result is not None:
        line += (
            f"  [{result.mismatch_count}/{result.total_records} mismatches,"
            f" {result.mismatch_rate:.1%}]"
        )
    return line


async def run(args: argparse.Namespace, settings: Settings) -> int:
    credentials = StaticCredentialProvider(args.token or settings.access_token)
    try:
        controller = build_controller(settings, credentials, owner_id=args.owner)
    except ValueError as exc:
        Log.error(str(exc))
        return 2
    try:
        await init_pool(settings)
        await controller.start()
        return await dispatch(controller, args, settings)
    finally:
        await controller.close()
        await close_pool()


async def dispatch(
    controller: DocumentsController, args: argparse.Namespace, settings: Settings
) -> int:
    if args.command == "list":
        for document in controller.documents:
            print(format_document(document))
        return 0

    if args.command == "upload":
        content_type, _ = mimetypes.guess_type(args.path.name)
        document = await controller.upload(args.path.name, args.path.read_bytes(), content_type)
        if document is not None:
            print(format_document(document))
        return _report(controller)

    if args.command == "analyze":
        await controller.trigger_analysis(args.document_id)
        return _report(controller)

    if args.command == "view":
        state = await controller.view(args.document_id)
        if state is not None:
            if state.table is not None:
                print(" | ".join(state.table.header))
                for row in state.table.display_rows():
                    print(" | ".join(row))
                print(state.table.summary())
            elif state.pdf_preview is not None:
                print(state.pdf_preview.text)
        return _report(controller)

    if args.command == "delete":

        async def confirm(document: Document) -> bool:
            if args.yes:
                return True
            answer = await asyncio.to_thread(input, f"Delete {document.file_name}? [y/N] ")
            return answer.strip().lower() == "y"

        await controller.delete(args.document_id, confirm)
        return _report(controller)

    if args.command == "watch":
        while controller.polling:
            await asyncio.sleep(settings.poll_interval_seconds)
        for document in controller.documents:
            print(format_document(document))
        return 0

    return 2


def _report(controller: DocumentsController) -> int:
    if controller.last_error:
        print(f"Error: {controller.last_error}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> open pool -> build controller -> run command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level, stream=sys.stderr)
    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        Log.info("Interrupted, shutting down")
        return 130


if __name__ == "__main__":
    sys.exit(main())
