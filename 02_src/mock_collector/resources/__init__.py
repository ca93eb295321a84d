"""Resource tracking module."""

from .expector import IResourceExpector, ResourceExpector

__all__ = ["IResourceExpector", "ResourceExpector"]
