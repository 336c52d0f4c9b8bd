"""
Services Package - Application Layer

This package contains stateless translation services shared by the
use cases.
"""

from .protocol_translator import (
    execute_batch,
    from_execute,
    parse_command,
    parse_execute_payload,
    render_execute_results,
    to_query,
    to_sync,
)

__all__ = [
    "execute_batch",
    "from_execute",
    "parse_command",
    "parse_execute_payload",
    "render_execute_results",
    "to_query",
    "to_sync",
]
