"""Simulated LHLS endpoints: windowed manifest and paced segments."""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response, StreamingResponse

from lhls.models import StreamStatus, WindowSegment
from lhls.services.errors import EmptyWindowError, ManifestEncodingError, SegmentNotFoundError
from lhls.services.shaper import gate, iter_shaped, plan_delivery, resolve_segment, segment_size
from lhls.services.window import compute_window, current_window, render_manifest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lhls", tags=["lhls"])

MANIFEST_CONTENT_TYPE = "application/x-mpegURL"
SEGMENT_CONTENT_TYPE = "video/MP2T"


@router.get("/manifest.m3u8")
async def get_manifest(request: Request):
    """
    Serve the live manifest for the current point in the simulated stream.

    Requesting the manifest after the whole playlist has played restarts
    the stream from the beginning.
    """
    state = request.app.state
    try:
        window, elapsed = current_window(
            state.clock,
            state.playlist,
            future_horizon=state.settings.future_horizon_sec,
            margin_segments=state.settings.window_margin_segments,
        )
        body = render_manifest(window, state.playlist)
    except (EmptyWindowError, ManifestEncodingError) as e:
        logger.error(f"Failed to generate manifest: {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate manifest")

    logger.info(
        f"Manifest at {elapsed:.3f}s: sequence {window.sequence_number}, "
        f"{len(window.segments)} segments"
    )
    return Response(content=body, media_type=MANIFEST_CONTENT_TYPE)


@router.get("/status", response_model=StreamStatus)
async def get_status(request: Request):
    """
    Report where the simulated stream is, without restarting it.

    Past the end of the playlist the window shown is the one the next
    manifest request will serve, after looping.
    """
    state = request.app.state
    playlist = state.playlist
    elapsed = state.clock.elapsed()
    position = elapsed if elapsed < playlist.total_duration else 0.0
    try:
        window = compute_window(
            position,
            playlist,
            future_horizon=state.settings.future_horizon_sec,
            margin_segments=state.settings.window_margin_segments,
        )
    except EmptyWindowError as e:
        logger.error(f"Failed to compute status window: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute stream status")

    return StreamStatus(
        elapsed=elapsed,
        total_duration=playlist.total_duration,
        target_duration=playlist.target_duration,
        loops=state.clock.loops,
        sequence_number=window.sequence_number,
        segments=[
            WindowSegment(uri=s.uri, duration=s.duration, start_offset=s.start_offset)
            for s in window.segments
        ],
    )


@router.get("/{segment_uri:path}")
async def get_segment(segment_uri: str, request: Request):
    """
    Serve a segment as if it were being produced live.

    Blocks until the segment's start time, then streams it at a rate that
    finishes around the end of its play window.
    """
    state = request.app.state
    clock = state.clock
    try:
        segment = resolve_segment(state.playlist, segment_uri)
        byte_size = segment_size(segment)
    except SegmentNotFoundError as e:
        logger.warning(f"Segment not found: {e}")
        raise HTTPException(status_code=404, detail="Not Found")

    plan = plan_delivery(
        segment,
        clock.elapsed(),
        byte_size,
        min_transfer=state.settings.min_transfer_sec,
    )
    await gate(plan, clock)

    logger.info(
        f"Serving segment {segment.uri} with duration {plan.remaining:.3f}s "
        f"ratelimit {plan.rate:.1f} B/s"
    )
    return StreamingResponse(
        iter_shaped(segment.path, plan.rate, clock, chunk_size=state.settings.chunk_size),
        media_type=SEGMENT_CONTENT_TYPE,
        headers={"Content-Length": str(byte_size)},
    )
