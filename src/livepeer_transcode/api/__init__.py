"""Livepeer API access."""

from livepeer_transcode.api.client import LivepeerClient
from livepeer_transcode.api.models import Stream

__all__ = ["LivepeerClient", "Stream"]
