"""Downloads episode audio and converts it for transcription using ffmpeg."""

import ffmpeg
import os
import logging
import requests
from .exceptions import AudioDownloadError, AudioExtractionError, FileSystemError
from typing import Optional
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

class AudioExtractor:
    """Fetches an episode's mp3 and prepares a 16 kHz mono WAV copy."""

    def __init__(self, ffmpeg_path: Optional[str] = None, timeout: float = 60):
        """
        Initializes the AudioExtractor.

        Args:
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
            timeout: Seconds to wait for the audio server to respond.
        """
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        self.timeout = timeout
        logger.info(f"Using ffmpeg command: {self.ffmpeg_cmd}")

    def download(self, url: str, output_dir: str, filename: str) -> str:
        """
        Streams a remote audio file to disk.

        Returns:
            The path of the downloaded file.

        Raises:
            AudioDownloadError: If the request fails or the body cannot be written.
            FileSystemError: If the output directory cannot be created/accessed.
        """
        ensure_dir_exists(output_dir)
        output_path = os.path.join(output_dir, filename)
        logger.info(f"Downloading audio from {url}")
        try:
            with requests.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                size = 0
                with open(output_path, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
                        size += len(chunk)
        except (requests.RequestException, OSError) as e:
            logger.error(f"Failed to download audio {url}: {e}")
            self._remove_partial(output_path)
            raise AudioDownloadError(f"Failed to download {url}: {e}") from e
        logger.info(f"Downloaded {size / (1024 * 1024):.2f} MB to {output_path}")
        return output_path

    def extract_audio(self, input_filepath: str, output_audio_dir: str, output_filename: Optional[str] = None) -> str:
        """
        Converts an audio (or video) file to a WAV file.

        Args:
            input_filepath: Path to the input media file.
            output_audio_dir: Directory to save the converted audio file.
            output_filename: Optional base name for the output audio file.
                             If None, uses the input filename.

        Returns:
            The full path to the converted audio file (WAV format).

        Raises:
            FileNotFoundError: If the input file does not exist.
            AudioExtractionError: If ffmpeg fails to convert the audio.
            FileSystemError: If the output directory cannot be created/accessed.
        """
        logger.info(f"Starting audio conversion for: {input_filepath}")
        if not os.path.exists(input_filepath):
            raise FileNotFoundError(f"Input audio file not found: {input_filepath}")

        ensure_dir_exists(output_audio_dir)

        if output_filename is None:
            base_name = os.path.splitext(os.path.basename(input_filepath))[0]
        else:
            base_name = os.path.splitext(output_filename)[0]

        output_audio_path = os.path.join(output_audio_dir, f"{base_name}.wav")
        if os.path.abspath(output_audio_path) == os.path.abspath(input_filepath):
            raise AudioExtractionError(f"Output would overwrite input file: {input_filepath}")

        if os.path.exists(output_audio_path):
            logger.warning(f"Output audio file already exists, overwriting: {output_audio_path}")
            try:
                os.remove(output_audio_path)
            except OSError as e:
                raise FileSystemError(f"Could not remove existing audio file {output_audio_path}: {e}") from e

        try:
            logger.info(f"Running ffmpeg to convert audio to {output_audio_path}...")
            # 16 kHz mono PCM is what Whisper resamples to anyway
            (
                ffmpeg
                .input(input_filepath)
                .output(output_audio_path, acodec='pcm_s16le', ar=16000, ac=1)
                .overwrite_output()
                .run(cmd=self.ffmpeg_cmd, capture_stdout=True, capture_stderr=True)
            )
            logger.info(f"Successfully converted audio to: {output_audio_path}")
            return output_audio_path
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffmpeg error during audio conversion for {input_filepath}: {stderr_output}")
            self._remove_partial(output_audio_path)
            raise AudioExtractionError(f"ffmpeg failed: {stderr_output}") from e

    @staticmethod
    def _remove_partial(path: str) -> None:
        if os.path.exists(path):
            try:
                os.remove(path)
            except OSError:
                logger.warning(f"Could not clean up partially written file: {path}")
