"""Data models for the LHLS faker API."""

from typing import List
from pydantic import BaseModel


class WindowSegment(BaseModel):
    """A segment currently exposed in the live manifest."""
    uri: str
    duration: float
    start_offset: float


class StreamStatus(BaseModel):
    """Snapshot of the simulated live stream."""
    elapsed: float
    total_duration: float
    target_duration: float
    loops: int
    sequence_number: int
    segments: List[WindowSegment]
