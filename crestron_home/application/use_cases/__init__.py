"""
Use Cases Package - Application Layer

Use cases orchestrate the gateway and the domain services: discovery of
the device list, live reads of single devices, and command dispatch.
"""

from .collection_fetcher import CollectionFetcher, RecordKind
from .command_use_cases import ApplyCommandUseCase, build_wire_request
from .device_use_cases import DiscoverDevicesUseCase, GetLiveDeviceUseCase
from .health_use_cases import GetHealthStatusUseCase

__all__ = [
    "ApplyCommandUseCase",
    "CollectionFetcher",
    "DiscoverDevicesUseCase",
    "GetHealthStatusUseCase",
    "GetLiveDeviceUseCase",
    "RecordKind",
    "build_wire_request",
]
