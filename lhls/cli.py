"""Command-line entry point: serve a VOD playlist as a fake live stream."""

import argparse
import logging
import sys

import uvicorn

from lhls.config import settings
from lhls.main import create_app
from lhls.services.errors import PlaylistError
from lhls.services.playlist_loader import load_playlist

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="lhls-faker",
        description="Serve an HLS media playlist as a simulated low-latency live stream",
    )
    parser.add_argument("playlist", help="Path to the input media playlist (.m3u8)")
    parser.add_argument("--host", default=settings.host, help="Address to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument(
        "--future-horizon",
        type=float,
        default=settings.future_horizon_sec,
        help="Seconds of not-yet-playable segments to expose in the manifest",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        playlist = load_playlist(args.playlist)
    except PlaylistError as e:
        logger.error(str(e))
        return 1

    app_settings = settings.model_copy(update={
        "host": args.host,
        "port": args.port,
        "future_horizon_sec": args.future_horizon,
        "log_level": args.log_level,
    })
    app = create_app(playlist, settings=app_settings)

    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
