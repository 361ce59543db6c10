"""
VoiceScribe command line.

Usage:
    voicescribe serve                      # Run the API server
    voicescribe record --target ja         # Record from the microphone, Enter to stop
    voicescribe process talk.webm --local  # Run the pipeline on an audio file in-process
"""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path

from voicescribe import __version__
from voicescribe.client.api_client import APIClient, APIError
from voicescribe.core.config import get_settings
from voicescribe.core.exceptions import VoiceScribeError
from voicescribe.core.logging import setup_logging
from voicescribe.core.models import PipelineRun, Recording, RunStatus, SummaryType
from voicescribe.services.orchestrator import PipelineOrchestrator
from voicescribe.services.pipeline.backend import LocalStageBackend, StageBackend
from voicescribe.services.storage.history import record_run

logger = logging.getLogger(__name__)


async def _print_progress(run: PipelineRun) -> None:
    print(f"  [{run.status}] stage={run.stage}")
    if run.status == RunStatus.failed:
        # The orchestrator re-raises after this snapshot; show what finished.
        _print_run(run)
    if run.status != RunStatus.idle:
        await record_run(run)


def _print_run(run: PipelineRun) -> None:
    print()
    if run.audio:
        print(f"Audio:         {run.audio.url}")
    if run.transcription:
        print(f"Transcription: {run.transcription.text}")
    if run.translation:
        print(f"Translation ({run.translation.target_language}): {run.translation.translation}")
    if run.summary:
        print(f"Summary ({run.summary.type}, {run.summary.language}):")
        print(run.summary.summary)


async def _make_backend(args: argparse.Namespace) -> StageBackend:
    if args.local:
        settings = get_settings()
        if settings.history_enabled:
            from voicescribe.services.storage.database import init_db

            await init_db()
        return LocalStageBackend.from_settings(settings)
    return APIClient(args.api_url or get_settings().api_base_url)


def _make_orchestrator(args: argparse.Namespace, backend: StageBackend) -> PipelineOrchestrator:
    return PipelineOrchestrator(
        backend,
        target_language=args.target,
        summary_type=args.summary_type,
        summary_language=args.summary_language,
        source_language=args.source,
        on_update=_print_progress,
    )


async def _close_backend(backend: StageBackend) -> None:
    if isinstance(backend, APIClient):
        await backend.aclose()
    else:
        from voicescribe.services.storage.database import close_db

        await close_db()


async def _record(args: argparse.Namespace) -> int:
    from voicescribe.services.audio import Recorder, create_audio_source

    backend = await _make_backend(args)
    try:
        orchestrator = _make_orchestrator(args, backend)
        recorder = Recorder(create_audio_source(), orchestrator.run)
        recorder.start()
        await asyncio.to_thread(input, "Recording... press Enter to stop.\n")
        run = await recorder.stop()
    finally:
        await _close_backend(backend)
    if run is not None:
        _print_run(run)
    return 0


async def _process(args: argparse.Namespace) -> int:
    path = Path(args.file)
    mime_type = args.mime_type or mimetypes.guess_type(path.name)[0] or "audio/webm"
    recording = Recording(data=path.read_bytes(), mime_type=mime_type)

    backend = await _make_backend(args)
    try:
        run = await _make_orchestrator(args, backend).run(recording)
    finally:
        await _close_backend(backend)
    _print_run(run)
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "voicescribe.api.app:app",
        host=args.host or settings.app_host,
        port=args.port or settings.app_port,
        reload=args.reload,
        log_config=None,
    )
    return 0


def _add_pipeline_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--target", default=None, help="Translation target language code")
    parser.add_argument(
        "--summary-type",
        choices=[t.value for t in SummaryType],
        default=None,
        help="Summary depth",
    )
    parser.add_argument(
        "--summary-language", default=None, help="Summary language (defaults to --target)"
    )
    parser.add_argument("--source", default=None, help="Spoken language hint for transcription")
    parser.add_argument(
        "--local",
        action="store_true",
        help="Run the stages in this process instead of calling the API server",
    )
    parser.add_argument("--api-url", default=None, help="API server base URL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voicescribe",
        description="Record speech, then transcribe, translate and summarize it.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    record = sub.add_parser("record", help="Record from the microphone and run the pipeline")
    _add_pipeline_options(record)

    process = sub.add_parser("process", help="Run the pipeline on an audio file")
    process.add_argument("file", help="Path to an audio file")
    process.add_argument("--mime-type", default=None, help="Override the detected MIME type")
    _add_pipeline_options(process)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "serve":
        return _serve(args)

    handler = _record if args.command == "record" else _process
    try:
        return asyncio.run(handler(args))
    except VoiceScribeError as exc:
        print(f"Error [{exc.code}]: {exc.detail}", file=sys.stderr)
        return 1
    except APIError as exc:
        print(f"Error ({exc.category}): {exc.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
