"""push-dispatch — push notification fan-out with per-token delivery tracking."""

from __future__ import annotations

__version__ = "0.1.0"
