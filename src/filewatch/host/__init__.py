"""Host integration for filewatch."""

from .base import Host, ResourceListener, ResourceId
from .local import LocalFileHost, Buffer

__all__ = ['Host', 'ResourceListener', 'ResourceId', 'LocalFileHost', 'Buffer']
