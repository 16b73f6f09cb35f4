"""
Algorithm adapters for itinerary search.
"""

from src.flight_network.adapters.algorithms.one_hop import OneHopItineraryFinder

__all__ = ["OneHopItineraryFinder"]
