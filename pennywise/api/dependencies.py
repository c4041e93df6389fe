"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional
from fastapi import Query, Request


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_reference_date(
    reference_date: Optional[date] = Query(None, description="Date treated as today (default: server date)"),
) -> date:
    """Resolve the caller's 'now'; the billing engine never reads the clock itself"""
    return reference_date or date.today()


def get_today(
    today: Optional[date] = Query(None, description="Date the newest cycle must contain (default: server date)"),
) -> date:
    """Resolve 'today' for cycle listings, supplied by the caller when replaying history"""
    return today or date.today()
