"""Git helpers for publishing generated tokens."""

from .deploy import Deployer
from .publisher import Publisher

__all__ = ["Deployer", "Publisher"]
