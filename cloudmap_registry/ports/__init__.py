"""Ports layer - Interfaces for external communication."""

from .clock import ClockPort
from .logger import LoggerPort
from .registry import RegistryPort, WatcherPort
from .service_directory import ServiceDirectoryPort

__all__ = [
    "ClockPort",
    "LoggerPort",
    "RegistryPort",
    "ServiceDirectoryPort",
    "WatcherPort",
]
