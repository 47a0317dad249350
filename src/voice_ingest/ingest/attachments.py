"""Turn chat voice attachments into message text.

Messaging channels hand over attachment references; this module downloads
them, runs the audio pipeline and renders the fragment that replaces the
attachment in the conversation.
"""

import asyncio
import tempfile
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

import aiohttp

from ..audio.processor import AudioProcessor
from ..errors import VoiceIngestError
from ..utils.logging import get_logger

logger = get_logger(__name__)

AUDIO_EXTENSIONS = (".amr", ".silk", ".mp3", ".wav", ".ogg", ".m4a")
DEFAULT_TRANSCRIPTION_TIMEOUT = 120.0
DEFAULT_DOWNLOAD_TIMEOUT = 60.0


@dataclass
class AudioReference:
    """One audio attachment of an incoming message."""

    filename: str
    url: Optional[str] = None
    local_path: str = ""


@dataclass
class AttachmentTranscript:
    """Rendered text for a batch of attachments plus the files it fetched."""

    content: str = ""
    local_files: List[str] = field(default_factory=list)
    failures: int = 0


def is_audio_file(filename: str) -> bool:
    """Return True if ``filename`` has a known voice/audio extension."""
    return filename.lower().endswith(AUDIO_EXTENSIONS)


async def download_attachment(
    session: aiohttp.ClientSession,
    url: str,
    filename: str,
    dest_dir: Optional[Union[str, Path]] = None,
    timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
) -> str:
    """Fetch ``url`` into a uniquely named local file.

    Returns:
        Local path, or an empty string if the download failed
    """
    dest = Path(dest_dir) if dest_dir else Path(tempfile.gettempdir())
    dest.mkdir(parents=True, exist_ok=True)
    name = Path(filename).name or "attachment"
    local_path = dest / f"{uuid.uuid4().hex[:8]}_{name}"

    logger.debug("Downloading attachment", extra={"url": url, "file_name": filename})

    try:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as response:
            if response.status != 200:
                logger.error(
                    "Attachment download failed",
                    extra={"url": url, "status_code": response.status},
                )
                return ""
            data = await response.read()
    except asyncio.TimeoutError:
        logger.error("Timeout downloading attachment", extra={"url": url})
        return ""
    except aiohttp.ClientError as e:
        logger.error("Connection error downloading attachment", extra={"url": url, "error": str(e)})
        return ""

    try:
        await asyncio.to_thread(local_path.write_bytes, data)
    except OSError as e:
        logger.error("Failed to save attachment", extra={"path": str(local_path), "error": str(e)})
        return ""

    return str(local_path)


async def transcribe_attachments(
    references: Iterable[AudioReference],
    processor: Optional[AudioProcessor],
    session: Optional[aiohttp.ClientSession] = None,
    dest_dir: Optional[Union[str, Path]] = None,
    timeout: float = DEFAULT_TRANSCRIPTION_TIMEOUT,
) -> AttachmentTranscript:
    """Download and transcribe each reference, one after another.

    Failures never abort the batch: each attachment degrades to a
    placeholder so the surrounding message still gets delivered. Files
    downloaded here are returned in ``local_files`` for the caller to
    delete once the message is handled.

    Args:
        references: Attachments of one message
        processor: Audio pipeline; None or unavailable means reference only
        session: HTTP session used for downloads
        dest_dir: Where downloads land
        timeout: Deadline in seconds for each attachment's transcription
    """
    transcript = AttachmentTranscript()
    parts: List[str] = []

    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession()

    try:
        for ref in references:
            if not ref.local_path and ref.url:
                ref.local_path = await download_attachment(session, ref.url, ref.filename, dest_dir)
                if ref.local_path:
                    transcript.local_files.append(ref.local_path)

            if not ref.local_path:
                transcript.failures += 1
                parts.append(f"[audio: {ref.filename} (download failed)]")
                continue

            if processor is None or not processor.is_available():
                parts.append(f"[audio: {ref.filename}]")
                continue

            try:
                text = await asyncio.wait_for(processor.process_audio(ref.local_path), timeout)
            except (VoiceIngestError, asyncio.TimeoutError) as e:
                logger.error(
                    "Audio transcription failed",
                    extra={"file_name": ref.filename, "error": str(e) or type(e).__name__},
                )
                transcript.failures += 1
                parts.append(f"[audio: {ref.filename} (transcription failed)]")
                continue
            except Exception as e:
                logger.error(
                    "Unexpected error transcribing audio",
                    extra={"file_name": ref.filename, "error": str(e) or type(e).__name__},
                    exc_info=True,
                )
                transcript.failures += 1
                parts.append(f"[audio: {ref.filename} (transcription failed)]")
                continue

            parts.append(f"[voice transcription: {text}]")
    finally:
        if owns_session:
            await session.close()

    transcript.content = "\n".join(parts)
    return transcript
