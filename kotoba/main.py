"""Main application entry point for Kotoba."""

import sys
import time
import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .config import KotobaConfig
from .errors import KotobaError
from .models.transcription import TranscriptionRecord
from .services import LifecyclePublisher, SessionOrchestrator, SessionStore
from .storage import TranscriptionStore
from .transcription import GoogleSpeechEngine, OllamaFormatter

logger = logging.getLogger(__name__)


class Application:
    """Wires configuration, adapters and the session orchestrator together."""

    def __init__(self, config_path: Optional[str] = None):
        self.config = KotobaConfig(config_path)
        log_level = self.config.get('logging.level', 'INFO')
        setup_logging(self.config, log_level)

        self.store = SessionStore(
            settings=self.config.load_settings(),
            lock_timeout=float(self.config.get('session.lock_timeout_seconds', 5.0)),
        )
        self.speech_engine = GoogleSpeechEngine(
            credentials_path=self.config.get_speech_credentials_path(),
            default_language=self.config.get('speech.default_language', 'en-US'),
            use_enhanced=self.config.get('speech.use_enhanced_model', True),
            enable_automatic_punctuation=self.config.get('speech.enable_automatic_punctuation', True),
            timeout=float(self.config.get('speech.timeout_seconds', 30.0)),
        )
        self.formatter = OllamaFormatter(
            timeout=float(self.config.get('formatting.timeout_seconds', 30.0)),
            temperature=float(self.config.get('formatting.temperature', 0.1)),
        )
        self.gateway = TranscriptionStore(self.config.get_data_directory())
        self.orchestrator = SessionOrchestrator(
            store=self.store,
            speech_engine=self.speech_engine,
            gateway=self.gateway,
            formatter=self.formatter,
            publisher=LifecyclePublisher(),
            fallback_language=self.config.get('transcription.fallback_language', 'en'),
        )

    def dictate(self, audio_path: str) -> str:
        """Run one full session over an already recorded WAV file."""
        started_at = time.time()
        update = self.orchestrator.start()
        self.orchestrator.stop()
        return self.orchestrator.finalize(
            update.session_id,
            audio_reference=str(Path(audio_path).absolute()),
            started_at=started_at,
            stopped_at=time.time(),
        )


def setup_logging(config: KotobaConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/kotoba.log')
    console_output = config.get('logging.console_output', True)

    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    ))
    handlers.append(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("Kotoba starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def render_history(records: List[TranscriptionRecord], console: Console) -> None:
    table = Table(title="Transcriptions")
    table.add_column("ID", justify="right")
    table.add_column("Created")
    table.add_column("Lang")
    table.add_column("Engine")
    table.add_column("Formatter")
    table.add_column("Text", overflow="fold")

    for record in records:
        table.add_row(
            str(record.id),
            datetime.fromtimestamp(record.created_at).strftime("%Y-%m-%d %H:%M:%S"),
            record.language or "-",
            record.speech_model or "-",
            record.formatting_model or "-",
            record.text,
        )
    console.print(table)


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Kotoba - dictation transcription")
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: kotoba.yaml)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="Kotoba v0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    dictate = subparsers.add_parser("dictate", help="Transcribe a recorded WAV file as one session")
    dictate.add_argument("audio", help="Path to WAV file")

    history = subparsers.add_parser("history", help="List saved transcriptions")
    history.add_argument("--limit", type=non_negative_int, default=50)
    history.add_argument("--offset", type=non_negative_int, default=0)

    delete = subparsers.add_parser("delete", help="Delete saved transcriptions")
    target = delete.add_mutually_exclusive_group(required=True)
    target.add_argument("id", type=int, nargs="?", help="Transcription id")
    target.add_argument("--all", action="store_true", help="Delete every transcription")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for Kotoba."""
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        app = Application(args.config)
        if args.command == "dictate":
            console.print(app.dictate(args.audio))
        elif args.command == "history":
            render_history(app.orchestrator.list_transcriptions(args.limit, args.offset), console)
        elif args.command == "delete":
            if args.all:
                app.orchestrator.delete_all_transcriptions()
            else:
                app.orchestrator.delete_transcription(args.id)
    except (KotobaError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
