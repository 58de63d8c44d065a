"""Video duration probing via ffprobe."""
import asyncio
import logging
import os
import subprocess
import tempfile
from pathlib import Path
from uuid import uuid4

import aiofiles

from linktrend.core.config import settings

logger = logging.getLogger(__name__)

ZERO_DURATION = "00:00"


def format_duration(seconds: float) -> str:
    """Formats seconds as MM:SS. Minutes are not wrapped into hours."""
    total = max(int(seconds), 0)
    minutes, remaining = divmod(total, 60)
    return f"{minutes:02d}:{remaining:02d}"


def _run_ffprobe(path: Path) -> str:
    cmd = [
        settings.FFPROBE_PATH, "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(path),
    ]
    result = subprocess.run(cmd, capture_output=True, timeout=settings.PROBE_TIMEOUT_SECONDS)
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="ignore")
        raise RuntimeError(f"ffprobe failed with code {result.returncode}: {stderr.strip()}")
    return result.stdout.decode("utf-8", errors="ignore").strip()


async def probe_duration(data: bytes, suffix: str = ".mp4") -> str:
    """
    Returns the playback duration of an in-memory video as MM:SS.
    Any failure (missing binary, unreadable file, timeout) yields 00:00.
    """
    temp_path = Path(tempfile.gettempdir()) / f"probe_{uuid4().hex}{suffix}"
    try:
        async with aiofiles.open(temp_path, "wb") as out_file:
            await out_file.write(data)

        loop = asyncio.get_running_loop()
        stdout = await loop.run_in_executor(None, _run_ffprobe, temp_path)
        return format_duration(float(stdout))
    except (OSError, RuntimeError, ValueError, OverflowError, subprocess.TimeoutExpired) as e:
        logger.warning("Could not probe video duration: %s", e)
        return ZERO_DURATION
    finally:
        if temp_path.exists():
            os.unlink(temp_path)
