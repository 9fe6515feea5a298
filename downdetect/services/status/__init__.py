from downdetect.services.status.cascade import DomainCascade
from downdetect.services.status.classifier import classify
from downdetect.services.status.counters import UsageCounters, UsageSnapshot
from downdetect.services.status.probe import ActiveProbe, ProbeOutcome
from downdetect.services.status.resolver import (
    DataSource,
    ResolutionResult,
    ServiceQuery,
    StatusResolver,
)

__all__ = [
    "ActiveProbe",
    "DataSource",
    "DomainCascade",
    "ProbeOutcome",
    "ResolutionResult",
    "ServiceQuery",
    "StatusResolver",
    "UsageCounters",
    "UsageSnapshot",
    "classify",
]
