"""
Playlist loading: parse an HLS media playlist into segments.

Only flat media playlists are supported. Master (variant) playlists are
rejected, since the simulation serves a single rendition.
"""

import logging
import math
import os
from dataclasses import dataclass, field
from typing import List, Optional

import m3u8
from m3u8.parser import ParseError

from lhls.services.errors import PlaylistError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    """A single media segment of the source playlist."""
    uri: str
    duration: float
    path: str
    index: int
    start_offset: float  # Sum of the durations of all preceding segments

    @property
    def end_offset(self) -> float:
        return self.start_offset + self.duration


@dataclass(frozen=True)
class Playlist:
    """The source media playlist, loaded once and never mutated."""
    segments: List[Segment] = field(repr=False)
    target_duration: float
    total_duration: float
    source_path: str = ""
    base_dir: str = ""

    def __len__(self) -> int:
        return len(self.segments)


def resolve_segment_path(uri: str, base_dir: str) -> str:
    """Resolve a segment URI relative to the playlist's directory."""
    if os.path.isabs(uri):
        return uri
    return os.path.normpath(os.path.join(base_dir, uri))


def build_playlist(
    entries: List[tuple],
    target_duration: Optional[float],
    base_dir: str,
    source_path: str = "",
) -> Playlist:
    """
    Build a Playlist from (uri, duration) pairs.

    Start offsets are accumulated here so both the window calculator and the
    segment gate share the same timeline.
    """
    if not entries:
        raise PlaylistError(f"Playlist has no segments: {source_path or base_dir}")

    segments = []
    offset = 0.0
    for index, (uri, duration) in enumerate(entries):
        if duration is None or duration <= 0:
            raise PlaylistError(f"Segment {uri!r} has invalid duration: {duration}")
        segments.append(Segment(
            uri=uri,
            duration=float(duration),
            path=resolve_segment_path(uri, base_dir),
            index=index,
            start_offset=offset,
        ))
        offset += float(duration)

    if not target_duration:
        # Same rule HLS encoders use: the longest segment, rounded up
        target_duration = math.ceil(max(s.duration for s in segments))

    return Playlist(
        segments=segments,
        target_duration=float(target_duration),
        total_duration=offset,
        source_path=source_path,
        base_dir=base_dir,
    )


def load_playlist(playlist_path: str) -> Playlist:
    """
    Load a media playlist from disk.

    Raises:
        PlaylistError: if the file can't be read or parsed, is a master
            playlist, or contains no usable segments.
    """
    try:
        parsed = m3u8.load(playlist_path)
    except (OSError, ValueError, ParseError) as e:
        raise PlaylistError(f"Failed to decode m3u8 {playlist_path}: {e}") from e

    if parsed.is_variant:
        raise PlaylistError("Only media playlists are supported")

    base_dir = os.path.dirname(os.path.abspath(playlist_path))
    entries = [(seg.uri, seg.duration) for seg in parsed.segments if seg.uri]

    playlist = build_playlist(
        entries,
        target_duration=parsed.target_duration,
        base_dir=base_dir,
        source_path=os.path.abspath(playlist_path),
    )

    logger.info(
        f"Loaded {len(playlist)} segments from {playlist_path} "
        f"(duration: {playlist.total_duration:.3f}s, segment dir: {base_dir})"
    )
    return playlist
