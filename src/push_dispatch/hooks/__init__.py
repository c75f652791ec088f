"""Event hooks — how the outside world triggers a dispatch run."""

from __future__ import annotations

from push_dispatch.hooks.registry import HookRegistry, register_push_hooks

__all__ = ["HookRegistry", "register_push_hooks"]
