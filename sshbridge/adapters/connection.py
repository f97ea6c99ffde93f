"""
Connection factory implementation
"""
from typing import Callable

import paramiko

from ..core.client import Credentials, RemoteClient
from ..core.interfaces import ConnectionFactory
from ..core.logging import get_logger

logger = get_logger(__name__)


class RemoteConnectionFactory(ConnectionFactory):
    """RemoteClient connection factory"""
    
    def __init__(self, client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient):
        self.client_factory = client_factory
    
    def create(self, credentials: Credentials) -> RemoteClient:
        """
        Create and connect SSH client.
        
        Args:
            credentials: Connection credentials
        
        Returns:
            Connected RemoteClient instance
        
        Raises:
            ConnectionError: If connection fails (the client is already closed)
        """
        client = RemoteClient(credentials, client_factory=self.client_factory)
        client.connect()
        logger.info("Connected to %s", credentials.target)
        return client
