"""
Lifecycle clients — perform one stop/remove against the container runtime.

Modules
-------
protocol    LifecycleClient protocol (Result-returning coroutines)
docker      DockerLifecycleClient (docker CLI via subprocess)
stub        StubLifecycleClient (scripted, in-memory)
"""

from devspine.lifecycle.docker import DockerLifecycleClient
from devspine.lifecycle.protocol import LifecycleClient
from devspine.lifecycle.stub import StubLifecycleClient

__all__ = [
    "DockerLifecycleClient",
    "LifecycleClient",
    "StubLifecycleClient",
]
