"""
Policies deciding whether server timing entries are sent.

A policy is any zero-argument callable returning a bool. It is evaluated on
every measurement event, so it must be cheap and must not block.
"""

from typing import Protocol

from server_timing.response import current_deployment


class EnabledCheck(Protocol):
    """Callable that decides whether to send timing for the current context."""

    def __call__(self) -> bool:
        ...


def default_enabled_check() -> bool:
    """
    Enabled when a request is being processed and its deployment is not in
    production mode (or explicitly opts in via SERVER_TIMING_ENABLED).
    """
    deployment = current_deployment()
    return deployment is not None and deployment.server_timing_enabled


def always_enabled() -> bool:
    return True


def never_enabled() -> bool:
    return False
