"""
Segment gate & shaper.

A segment is held back until its nominal start time on the simulated
timeline, then its bytes are paced so the transfer ends roughly when the
segment would have finished playing. Without the pacing a client could pull
the whole "future" of the stream instantly.
"""

import logging
import os
from dataclasses import dataclass
from typing import AsyncIterator

import aiofiles

from lhls.config import settings
from lhls.services.clock import StreamClock
from lhls.services.errors import SegmentNotFoundError
from lhls.services.playlist_loader import Playlist, Segment

logger = logging.getLogger(__name__)


@dataclass
class DeliveryPlan:
    """How long to hold a segment back, and how fast to send it afterwards."""
    segment: Segment
    byte_size: int
    wait: float
    effective_elapsed: float
    remaining: float

    @property
    def rate(self) -> float:
        """Target output rate in bytes per second."""
        return self.byte_size / self.remaining


def resolve_segment(playlist: Playlist, uri: str) -> Segment:
    """Find a segment by URI, ignoring case."""
    wanted = uri.casefold()
    for segment in playlist.segments:
        if segment.uri.casefold() == wanted:
            return segment
    raise SegmentNotFoundError(uri)


def segment_size(segment: Segment) -> int:
    """Byte size of the segment's backing file, read at request time."""
    try:
        if not os.path.isfile(segment.path):
            raise SegmentNotFoundError(segment.uri, f"missing file {segment.path}")
        return os.path.getsize(segment.path)
    except OSError as e:
        raise SegmentNotFoundError(segment.uri, f"failed to stat file: {e}") from e


def plan_delivery(
    segment: Segment,
    elapsed: float,
    byte_size: int,
    min_transfer: float = settings.min_transfer_sec,
) -> DeliveryPlan:
    """
    Gate and rate for one segment request.

    A future segment waits exactly until its start offset; after the wait the
    elapsed time is taken to be the start offset rather than re-measured, so
    wake-up jitter doesn't inflate the rate.
    """
    wait = 0.0
    if segment.start_offset > elapsed:
        wait = segment.start_offset - elapsed
        elapsed = segment.start_offset

    remaining = max(segment.end_offset - elapsed, min_transfer)

    return DeliveryPlan(
        segment=segment,
        byte_size=byte_size,
        wait=wait,
        effective_elapsed=elapsed,
        remaining=remaining,
    )


async def iter_shaped(
    path: str,
    rate: float,
    clock: StreamClock,
    chunk_size: int = settings.chunk_size,
) -> AsyncIterator[bytes]:
    """
    Yield a file's bytes at roughly `rate` bytes per second.

    Each chunk is released once the bytes sent so far, including it, are due
    at the target rate. Stops at end of file, or when the consumer goes away
    and the generator is closed.
    """
    started = clock.now()
    sent = 0

    async with aiofiles.open(path, "rb") as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break

            sent += len(chunk)
            # A file that was empty when planned has no rate to pace against
            if rate > 0:
                due = started + sent / rate
                await clock.sleep(due - clock.now())
            yield chunk

    logger.debug(f"Finished {path}: {sent} bytes in {clock.now() - started:.3f}s")


async def gate(plan: DeliveryPlan, clock: StreamClock):
    """Suspend until the segment's broadcast time arrives."""
    if plan.wait > 0:
        logger.info(f"Segment {plan.segment.uri} is in the future, waiting for {plan.wait:.3f}s")
        await clock.sleep(plan.wait)
