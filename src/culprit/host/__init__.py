"""Hosts and discovery of toggleable units."""

from culprit.host.base import Host
from culprit.host.command import CommandHost
from culprit.host.discovery import Discovery

__all__ = [
    "Host",
    "CommandHost",
    "Discovery",
]
