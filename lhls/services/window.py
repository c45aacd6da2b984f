"""
Window calculator: which segments of the source playlist are "live" now.

The window keeps a trailing margin of a few target durations behind the
play position, so clients polling slightly late still find the segment that
overlaps their position, and a few seconds of future segments for lookahead.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

import m3u8

from lhls.config import settings
from lhls.services.clock import StreamClock
from lhls.services.errors import EmptyWindowError, ManifestEncodingError
from lhls.services.playlist_loader import Playlist, Segment

logger = logging.getLogger(__name__)


@dataclass
class Window:
    """Segments visible at one instant, plus the media sequence of the first."""
    segments: List[Segment]
    sequence_number: int

    @property
    def uris(self) -> List[str]:
        return [s.uri for s in self.segments]


def compute_window(
    elapsed: float,
    playlist: Playlist,
    future_horizon: float = settings.future_horizon_sec,
    margin_segments: int = settings.window_margin_segments,
) -> Window:
    """
    Compute the live window for a given elapsed stream time.

    A segment is included when its end (the running cursor) plus the margin
    is past `elapsed`. The walk stops after the first segment ending beyond
    `elapsed + future_horizon`.

    Raises:
        EmptyWindowError: if no segment qualifies. Cannot happen for a
            non-empty playlist with 0 <= elapsed < total_duration.
    """
    margin = margin_segments * playlist.target_duration
    cursor = 0.0
    included = []

    for segment in playlist.segments:
        cursor += segment.duration

        if cursor + margin > elapsed:
            included.append(segment)

        if cursor > elapsed + future_horizon:
            break

    if not included:
        raise EmptyWindowError(
            f"No segments in window at elapsed={elapsed:.3f}s "
            f"(total duration {playlist.total_duration:.3f}s)"
        )

    return Window(segments=included, sequence_number=included[0].index)


def current_window(
    clock: StreamClock,
    playlist: Playlist,
    future_horizon: float = settings.future_horizon_sec,
    margin_segments: int = settings.window_margin_segments,
) -> Tuple[Window, float]:
    """
    Window for a manifest request happening now.

    Once the whole playlist has played, the clock is re-anchored and the
    window is computed as if the stream had just started.
    """
    now = clock.now()
    elapsed = clock.elapsed(now)
    logger.debug(f"Generating playlist, elapsed: {elapsed:.3f}s")

    if elapsed >= playlist.total_duration:
        logger.info(
            f"Stream finished after {elapsed:.3f}s "
            f"(duration {playlist.total_duration:.3f}s), looping"
        )
        clock.reset(now)
        elapsed = 0.0

    window = compute_window(elapsed, playlist, future_horizon, margin_segments)
    return window, elapsed


def render_manifest(window: Window, playlist: Playlist) -> str:
    """Encode a window as a live HLS media playlist (no ENDLIST tag)."""
    try:
        manifest = m3u8.M3U8()
        manifest.version = 3
        manifest.target_duration = int(math.ceil(playlist.target_duration))
        manifest.media_sequence = window.sequence_number
        manifest.is_endlist = False

        for segment in window.segments:
            manifest.add_segment(m3u8.Segment(uri=segment.uri, duration=segment.duration))

        return manifest.dumps()
    except Exception as e:
        raise ManifestEncodingError(f"{type(e).__name__}: {e}") from e
