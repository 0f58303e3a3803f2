# Controllers for shinelauncher
# Network mode gate, update lifecycle and pushed-event ingestion.

from .network_mode import NetworkModeGate
from .update_coordinator import UpdateLifecycleCoordinator
from .event_ingestor import EventIngestor, parse_event

__all__ = [
    'NetworkModeGate',
    'UpdateLifecycleCoordinator',
    'EventIngestor',
    'parse_event',
]
