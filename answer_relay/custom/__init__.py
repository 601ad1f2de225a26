"""
Custom endpoint package.

Exports:
- EndpointDiscoveryClient: probes a self-hosted endpoint of unknown shape
"""

from .client import EndpointDiscoveryClient, aggregate_message, schema_for

__all__ = ["EndpointDiscoveryClient", "aggregate_message", "schema_for"]
