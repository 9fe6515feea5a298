from fastapi import Request

from downdetect.services.status.counters import UsageCounters
from downdetect.services.status.resolver import StatusResolver


def get_status_resolver(request: Request) -> StatusResolver:
    """Return the status resolver stored on app state during lifespan."""
    return request.app.state.status_resolver


def get_usage_counters(request: Request) -> UsageCounters:
    return request.app.state.status_resolver.counters
