"""Runtime services (telemetry) shared by queues and managers."""

from . import telemetry

__all__ = ["telemetry"]
