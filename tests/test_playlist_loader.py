"""Tests for loading media playlists from disk."""

import os

import pytest

from lhls.services.errors import PlaylistError
from lhls.services.playlist_loader import build_playlist, load_playlist, resolve_segment_path

from conftest import write_playlist


class TestLoadPlaylist:

    def test_load_media_playlist(self, tmp_path):
        playlist = load_playlist(str(write_playlist(tmp_path, [10, 10, 5])))

        assert len(playlist) == 3
        assert playlist.target_duration == 10.0
        assert playlist.total_duration == 25.0
        assert playlist.base_dir == str(tmp_path)
        assert [s.uri for s in playlist.segments] == ["seg000.ts", "seg001.ts", "seg002.ts"]

    def test_start_offsets_accumulate(self, tmp_path):
        playlist = load_playlist(str(write_playlist(tmp_path, [6, 4, 6])))

        assert [s.start_offset for s in playlist.segments] == [0.0, 6.0, 10.0]
        assert [s.end_offset for s in playlist.segments] == [6.0, 10.0, 16.0]
        assert [s.index for s in playlist.segments] == [0, 1, 2]

    def test_segment_paths_resolve_against_playlist_dir(self, tmp_path):
        media = tmp_path / "media"
        media.mkdir()
        playlist = load_playlist(str(write_playlist(media, [4, 4])))

        assert playlist.segments[0].path == os.path.join(str(media), "seg000.ts")
        assert os.path.isfile(playlist.segments[1].path)

    def test_reject_master_playlist(self, tmp_path):
        path = tmp_path / "master.m3u8"
        path.write_text(
            "#EXTM3U\n"
            "#EXT-X-STREAM-INF:BANDWIDTH=1280000,RESOLUTION=640x360\n"
            "low/index.m3u8\n"
            "#EXT-X-STREAM-INF:BANDWIDTH=2560000,RESOLUTION=1280x720\n"
            "high/index.m3u8\n"
        )

        with pytest.raises(PlaylistError, match="media playlists"):
            load_playlist(str(path))

    def test_reject_missing_file(self, tmp_path):
        with pytest.raises(PlaylistError):
            load_playlist(str(tmp_path / "nope.m3u8"))

    def test_reject_playlist_without_segments(self, tmp_path):
        path = tmp_path / "empty.m3u8"
        path.write_text("#EXTM3U\n#EXT-X-TARGETDURATION:10\n#EXT-X-ENDLIST\n")

        with pytest.raises(PlaylistError, match="no segments"):
            load_playlist(str(path))


class TestBuildPlaylist:

    def test_target_duration_defaults_to_longest_segment(self, tmp_path):
        playlist = build_playlist([("a.ts", 4.5), ("b.ts", 6.2)], None, str(tmp_path))

        assert playlist.target_duration == 7.0
        assert playlist.total_duration == pytest.approx(10.7)

    def test_reject_non_positive_duration(self, tmp_path):
        with pytest.raises(PlaylistError, match="invalid duration"):
            build_playlist([("a.ts", 4.0), ("b.ts", 0)], 4, str(tmp_path))

    def test_absolute_uri_kept(self, tmp_path):
        absolute = os.path.join(str(tmp_path), "elsewhere", "a.ts")
        assert resolve_segment_path(absolute, "/var/media") == absolute
        assert resolve_segment_path("sub/a.ts", "/var/media") == "/var/media/sub/a.ts"
