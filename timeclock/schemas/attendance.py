"""Pydantic schemas for the clock-in API."""

from __future__ import annotations

from pydantic import BaseModel


# ── Clock-in ────────────────────────────────────────────────────────
class ClockInRequest(BaseModel):
    # Left as raw strings: emptiness and timestamp legality are domain
    # rules and are reported through the workflow's error envelope.
    employee_id: str
    timestamp: str


class ClockInResponse(BaseModel):
    success: bool
    employee_id: str
    clock_in_time: str


# ── Errors ──────────────────────────────────────────────────────────
class ErrorResponse(BaseModel):
    success: bool = False
    error: str


# ── Health ──────────────────────────────────────────────────────────
class HealthResponse(BaseModel):
    db: bool
