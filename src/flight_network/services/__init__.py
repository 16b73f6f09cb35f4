"""
Domain services for the flight network.

Services orchestrate the interaction between ports (store, search
algorithms) and domain logic (aggregation, reference checks).
"""

from src.flight_network.services.network_service import NetworkService

__all__ = ["NetworkService"]
