"""Utility modules for container operations, whitelist loading and formatting."""

from utils.docker_utils import DockerClient
from utils.whitelist import load_whitelist

__all__ = [
    "DockerClient",
    "load_whitelist",
]
