"""
Adapter implementations for the flight network.

Adapters are concrete implementations of the port interfaces.
They handle the specifics of data sources, storage, and search.
"""
