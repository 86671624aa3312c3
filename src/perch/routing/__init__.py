"""Routing: endpoints, history, and the navigator.

Endpoints are registered during setup; the navigator renders views,
keeps the back stack, and turns UI events into handler calls.
"""

from perch.routing.endpoints import Endpoint, endpoint
from perch.routing.history import HistoryEntry, HistoryStack
from perch.routing.navigator import Navigator
from perch.routing.registry import EndpointRegistry

__all__ = [
    "Endpoint",
    "EndpointRegistry",
    "HistoryEntry",
    "HistoryStack",
    "Navigator",
    "endpoint",
]
