#!/usr/bin/env python3
"""
LHLS Faker - Live Probe

Polls a running server the way a player would and reports:
1. How the manifest window and media sequence move over time
2. How long each newly listed segment takes to arrive

Usage:
    python scripts/probe_stream.py --base http://localhost:8080 --polls 5
"""

import argparse
import sys
import time

import m3u8
import requests


def fetch_manifest(base: str) -> m3u8.M3U8:
    r = requests.get(f"{base}/lhls/manifest.m3u8", timeout=10)
    r.raise_for_status()
    return m3u8.loads(r.text)


def time_segment(base: str, uri: str) -> tuple:
    """Download a segment, returning (bytes, seconds to first byte, total seconds)."""
    started = time.monotonic()
    first_byte = None
    size = 0
    with requests.get(f"{base}/lhls/{uri}", stream=True, timeout=120) as r:
        r.raise_for_status()
        for chunk in r.iter_content(chunk_size=16384):
            if first_byte is None:
                first_byte = time.monotonic() - started
            size += len(chunk)
    return size, first_byte or 0.0, time.monotonic() - started


def main():
    parser = argparse.ArgumentParser(description="Probe a running LHLS faker")
    parser.add_argument("--base", default="http://localhost:8080", help="Server base URL")
    parser.add_argument("--polls", type=int, default=5, help="Number of manifest polls")
    parser.add_argument("--fetch", action="store_true", help="Also download the newest segment each poll")
    args = parser.parse_args()

    print("=" * 60)
    print("LHLS PROBE")
    print("=" * 60)

    last_sequence = None
    ok = True

    for i in range(args.polls):
        try:
            manifest = fetch_manifest(args.base)
        except requests.RequestException as e:
            print(f"   ❌ ERROR: {e}")
            sys.exit(1)

        sequence = manifest.media_sequence or 0
        uris = [s.uri for s in manifest.segments]
        print(f"\n🔍 Poll {i + 1}: sequence {sequence}, {len(uris)} segments")
        for uri in uris:
            print(f"   • {uri}")

        if last_sequence is not None and sequence < last_sequence:
            print(f"   ℹ️ INFO: sequence went back ({last_sequence} -> {sequence}), stream looped")

        if args.fetch and uris:
            size, ttfb, total = time_segment(args.base, uris[-1])
            print(f"   📊 {uris[-1]}: {size} bytes, first byte {ttfb:.2f}s, total {total:.2f}s")
            if total < 0.5:
                print("   ❌ FAIL: segment arrived instantly, pacing not applied")
                ok = False

        last_sequence = sequence
        time.sleep(manifest.target_duration or 1)

    print("\n" + "=" * 60)
    if ok:
        print("✅ Probe finished")
    else:
        print("❌ Pacing issues found")
        sys.exit(1)


if __name__ == "__main__":
    main()
