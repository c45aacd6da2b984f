"""Shared fixtures: a virtual clock and small on-disk playlists."""

import pytest

from lhls.services.clock import StreamClock
from lhls.services.playlist_loader import load_playlist


class FakeClock(StreamClock):
    """StreamClock on virtual time; sleeping advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.current = start
        self.slept = []
        super().__init__(time_source=lambda: self.current)

    def advance(self, seconds: float):
        self.current += seconds

    async def sleep(self, seconds: float):
        if seconds > 0:
            self.slept.append(seconds)
            self.current += seconds


def write_playlist(directory, durations, target_duration=None, segment_bytes=1000, name="playlist.m3u8"):
    """Write segNNN.ts files plus a media playlist listing them."""
    if target_duration is None:
        target_duration = max(durations)
    lines = [
        "#EXTM3U",
        "#EXT-X-VERSION:3",
        f"#EXT-X-TARGETDURATION:{target_duration}",
        "#EXT-X-MEDIA-SEQUENCE:0",
    ]
    for i, duration in enumerate(durations):
        uri = f"seg{i:03d}.ts"
        (directory / uri).write_bytes(bytes([i % 256]) * segment_bytes)
        lines.append(f"#EXTINF:{duration},")
        lines.append(uri)
    lines.append("#EXT-X-ENDLIST")

    path = directory / name
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def three_segment_playlist(tmp_path):
    """Three 10 second segments, target duration 10."""
    return load_playlist(str(write_playlist(tmp_path, [10, 10, 10])))


@pytest.fixture
def short_segment_playlist(tmp_path):
    """Ten 4 second segments, target duration 4."""
    return load_playlist(str(write_playlist(tmp_path, [4] * 10)))


@pytest.fixture
def mixed_playlist(tmp_path):
    """Uneven segment durations, as produced by keyframe-aligned segmenters."""
    return load_playlist(str(write_playlist(tmp_path, [6.006, 4.004, 6.006, 2.002, 6.006, 5.5, 6.006, 3.0], target_duration=7)))
