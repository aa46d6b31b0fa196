"""Novated lease quote engine for Australian salary-packaged vehicles."""

from novated_lease.config.request import LeaseRequest, build_lease_request
from novated_lease.engine.orchestrator import generate_quote

__version__ = "1.0.0"

__all__ = ["LeaseRequest", "build_lease_request", "generate_quote"]
