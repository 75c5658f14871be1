"""Authorization collaborators."""

from query_gateway.auth.accessibility import build_accessibility_filter
from query_gateway.auth.arborist_client import ArboristClient

__all__ = ["ArboristClient", "build_accessibility_filter"]
