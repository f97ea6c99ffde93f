"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod

from .client import Credentials, RemoteClient


class ConnectionFactory(ABC):
    """SSH connection factory interface"""
    
    @abstractmethod
    def create(self, credentials: Credentials) -> RemoteClient:
        """Create and connect SSH client"""
        pass
