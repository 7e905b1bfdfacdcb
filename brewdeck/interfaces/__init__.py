"""
Interface definitions for brewdeck.

Abstract base classes for the components that touch the outside world,
so services can be tested against in-memory fakes.

Available Interfaces:
    ICommandRunner: Blocking brew invocation
    IStreamingRunner: Line-streaming brew invocation
"""

from brewdeck.interfaces.runner import ICommandRunner, IStreamingRunner

__all__ = [
    "ICommandRunner",
    "IStreamingRunner",
]
