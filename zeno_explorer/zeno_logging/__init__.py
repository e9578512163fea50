"""
Structured logging for the Zeno explorer backend.

JSON logs with timestamp, event_type and call context.
"""

from zeno_explorer.zeno_logging.logger import (
    bind_view,
    configure_logging,
    get_logger,
    relay_context,
)

__all__ = ["bind_view", "configure_logging", "get_logger", "relay_context"]
