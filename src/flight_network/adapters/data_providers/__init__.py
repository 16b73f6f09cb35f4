"""
Data provider adapters.
"""

from src.flight_network.adapters.data_providers.frame_provider import (
    FrameDataProvider,
)
from src.flight_network.adapters.data_providers.openflights_provider import (
    OpenFlightsDataProvider,
)

__all__ = ["FrameDataProvider", "OpenFlightsDataProvider"]
