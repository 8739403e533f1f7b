"""Command-Line Interface handler for PodSync."""

import argparse
import logging
import sys
from typing import List, Optional

from .config_loader import ConfigLoader, resolve_path
from .log_setup import resolve_log_level, setup_logging
from .audio_extractor import AudioExtractor
from .cleaner import TranscriptCleaner
from .episode_store import EpisodeStore
from .pipeline import EpisodePipeline
from .sync import PlaybackSession
from .transcript_store import ARABIC, ENGLISH, TranscriptStore
from .utils import format_timestamp
from .exceptions import PodSyncError, ConfigurationError

logger = logging.getLogger(__name__) # Get logger for this module

def load_components(config: dict, need_transcriber: bool = False, need_translator: bool = False) -> EpisodePipeline:
    """Builds the pipeline, loading only the models the command needs."""
    episode_store = EpisodeStore(resolve_path(config, 'episodes_file'))
    transcript_store = TranscriptStore(resolve_path(config, 'transcripts_dir'))
    device = config.get('device', 'cuda')

    audio_extractor = None
    transcriber = None
    translator = None
    if need_transcriber:
        # Model libraries are heavy; import them only when a command needs them
        from .transcriber import WhisperTranscriber
        audio_extractor = AudioExtractor(
            ffmpeg_path=config.get('ffmpeg_path'),
            timeout=config.get('request_timeout', 60),
        )
        transcriber = WhisperTranscriber(
            model_name=config.get('whisper_model', 'medium'),
            device=device,
            fp16=config.get('whisper_fp16', True) if device == 'cuda' else False
        )
    if need_translator:
        from .translator import HuggingFaceTranslator
        translator = HuggingFaceTranslator(
            model_name=config.get('translation_model', 'Helsinki-NLP/opus-mt-ar-en'),
            device=device
        )
    return EpisodePipeline(
        config=config,
        episode_store=episode_store,
        transcript_store=transcript_store,
        audio_extractor=audio_extractor,
        transcriber=transcriber,
        translator=translator,
    )

class CLIHandler:
    """Parses arguments and dispatches PodSync commands."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            prog="podsync",
            description="PodSync: bilingual, synchronized transcripts for Arabic podcasts.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "-c", "--config",
            default=None,
            help="Path to the configuration YAML file. Built-in defaults are used when omitted."
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        parser.add_argument(
            "--device",
            default=None, # Default taken from config
            choices=["cuda", "cpu"],
            help="Override the processing device (cuda or cpu) specified in config."
        )

        sub = parser.add_subparsers(dest="command", required=True)

        fetch = sub.add_parser("fetch", help="Fetch the RSS feed and store new episodes.")
        fetch.add_argument("--translate", action="store_true", help="Also translate titles and descriptions.")

        sub.add_parser("list", help="List stored episodes and their transcript status.")

        for name, help_text in (
            ("transcribe", "Transcribe an episode's Arabic audio."),
            ("translate", "Translate an episode's Arabic transcript to English."),
            ("process", "Transcribe and translate an episode."),
        ):
            cmd = sub.add_parser(name, help=help_text)
            cmd.add_argument("episode_id")

        sub.add_parser("clean-all", help="Strip leading ad segments from every stored transcript.")

        offset = sub.add_parser("set-offset", help="Store the playback offset for an episode.")
        offset.add_argument("episode_id")
        offset.add_argument("seconds", type=float)

        locate = sub.add_parser("locate", help="Show the transcript segment playing at an audio position.")
        locate.add_argument("episode_id")
        locate.add_argument("audio_seconds", type=float)
        locate.add_argument("--offset", type=float, default=None, help="Override the stored playback offset.")

        seek = sub.add_parser("seek", help="Show the audio position where a transcript segment starts.")
        seek.add_argument("episode_id")
        seek.add_argument("segment_id", type=int)
        seek.add_argument("--offset", type=float, default=None, help="Override the stored playback offset.")

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Parses arguments, sets up logging, loads config, and runs the command. Returns the exit code."""
        args = self.parser.parse_args(argv)

        log_level = resolve_log_level(args.log_level)
        setup_logging(log_level=log_level, log_dir='logs', log_file='podsync_init.log')

        try:
            config = ConfigLoader().load_config(args.config)
        except (ConfigurationError, FileNotFoundError) as e:
            logger.critical(f"Failed to load configuration from {args.config}: {e}")
            return 1

        setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file=config['log_file'])
        if args.device:
            logger.info(f"Overriding device from config with CLI argument: {args.device}")
            config['device'] = args.device

        handler = getattr(self, "_cmd_" + args.command.replace("-", "_"))
        try:
            handler(args, config)
        except PodSyncError as e:
            logger.error(f"A PodSync error occurred: {e}")
            return 1
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            return 1
        return 0

    def _cmd_fetch(self, args, config: dict) -> None:
        pipeline = load_components(config, need_translator=args.translate)
        new_episodes = pipeline.ingest_feed(translate_metadata=args.translate)
        for episode in new_episodes:
            print(f"{episode.id}\t{episode.published}\t{episode.title_arabic}")

    def _cmd_list(self, args, config: dict) -> None:
        pipeline = load_components(config)
        transcripts = pipeline.transcript_store
        for episode in pipeline.episode_store.load():
            status = "".join((
                "A" if transcripts.exists(episode.id, ARABIC) else "-",
                "E" if transcripts.exists(episode.id, ENGLISH) else "-",
            ))
            print(f"{episode.id}\t{status}\t{episode.title_english or episode.title_arabic}")

    def _cmd_transcribe(self, args, config: dict) -> None:
        track = load_components(config, need_transcriber=True).transcribe(args.episode_id)
        print(f"{track.id}: {len(track.segments)} segments")

    def _cmd_translate(self, args, config: dict) -> None:
        track = load_components(config, need_translator=True).translate(args.episode_id)
        print(f"{track.id}: {len(track.segments)} segments translated")

    def _cmd_process(self, args, config: dict) -> None:
        load_components(config, need_transcriber=True, need_translator=True).process(args.episode_id)

    def _cmd_clean_all(self, args, config: dict) -> None:
        pipeline = load_components(config)
        cleaner = TranscriptCleaner(
            pipeline.transcript_store,
            latin_marker=config['latin_marker'],
            native_marker=config['native_marker'],
        )
        report = cleaner.clean_all(show_progress=True)
        print(f"processed={report.processed} cleaned={report.cleaned} skipped={report.skipped} errors={report.errors}")

    def _cmd_set_offset(self, args, config: dict) -> None:
        load_components(config).episode_store.set_playback_offset(args.episode_id, args.seconds)

    def _session(self, args, config: dict) -> PlaybackSession:
        pipeline = load_components(config)
        track = pipeline.transcript_store.load(args.episode_id, ARABIC)
        offset = args.offset
        if offset is None:
            offset = pipeline.episode_store.get_playback_offset(args.episode_id)
        return PlaybackSession(track=track, playback_offset=offset)

    def _cmd_locate(self, args, config: dict) -> None:
        session = self._session(args, config)
        session.on_position(args.audio_seconds)
        segment = session.current_segment
        if segment is None:
            print("No transcript segment.")
            return
        relative = segment.start - session.first_segment_start
        print(f"[{segment.id}] {format_timestamp(relative)} {segment.text}")

    def _cmd_seek(self, args, config: dict) -> None:
        session = self._session(args, config)
        try:
            position = session.seek_to(args.segment_id)
        except KeyError as e:
            raise PodSyncError(str(e)) from e
        print(f"{position:.2f}")

def main(argv: Optional[List[str]] = None) -> None:
    sys.exit(CLIHandler().run(argv))
