#!/usr/bin/env python3
"""
PodSync Batch Processing Entry Point

Transcribes and translates every stored episode that has no transcript yet,
oldest first, loading the speech and translation models only once.
"""

import argparse
import logging
import sys
import time

# Progress bar library
from tqdm import tqdm

from podsync.config_loader import ConfigLoader
from podsync.log_setup import resolve_log_level, setup_logging
from podsync.cli import load_components
from podsync.exceptions import PodSyncError, ConfigurationError

# Initialize logger for this script
logger = logging.getLogger(__name__)


def run_batch_processing() -> int:
    """Parses arguments, sets up, and runs batch transcription. Returns the exit code."""
    parser = argparse.ArgumentParser(
        description="PodSync Batch: transcribe and translate all pending episodes.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to the configuration YAML file."
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
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Fetch the RSS feed for new episodes before processing."
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Process at most this many episodes."
    )
    args = parser.parse_args()

    log_level = resolve_log_level(args.log_level)
    setup_logging(log_level=log_level, log_dir='logs', log_file='podsync_batch_init.log')

    try:
        config = ConfigLoader().load_config(args.config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.critical(f"Failed to load configuration: {e}")
        return 1

    setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file='podsync_batch.log')
    if args.device:
        logger.info(f"Overriding device from config with CLI argument: {args.device}")
        config['device'] = args.device

    # --- Initialize Components (ONCE) ---
    try:
        logger.info("Initializing PodSync components for batch processing...")
        pipeline = load_components(config, need_transcriber=True, need_translator=True)
        if args.fetch:
            pipeline.ingest_feed(translate_metadata=True)
        # The store keeps newest first; work through the backlog in publication order
        pending = list(reversed(pipeline.pending_episodes()))
    except PodSyncError as e:
        logger.critical(f"Failed to initialize PodSync components: {e}", exc_info=True)
        return 1

    if args.limit is not None:
        pending = pending[:args.limit]
    if not pending:
        logger.info("No pending episodes. Exiting.")
        return 0

    total = len(pending)
    processed = 0
    failed = 0
    batch_start_time = time.time()
    logger.info(f"--- Starting batch processing for {total} episodes ---")

    with tqdm(total=total, unit="episode", desc="Starting Batch") as pbar:
        for episode in pending:
            pbar.set_description(f"Processing: {episode.id}")
            try:
                pipeline.process(episode.id)
                processed += 1
            except PodSyncError as e:
                logger.error(f"PodSync failed for episode '{episode.id}': {e}")
                failed += 1
            except KeyboardInterrupt:
                logger.warning("Batch process interrupted by user (Ctrl+C). Exiting.")
                return 1
            finally:
                pbar.update(1)

    logger.info("--- Batch Processing Finished ---")
    logger.info(f"Total time: {time.time() - batch_start_time:.2f} seconds")
    logger.info(f"Successfully processed: {processed}/{total} episodes")
    logger.info(f"Failed: {failed}/{total} episodes")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(run_batch_processing())
