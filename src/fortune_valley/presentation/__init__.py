"""Presentation layer for the Fortune Valley economy engine.

Public API
----------
- :class:`ConsoleDashboard` -- rich (or plain-text) console output
- :func:`export_json`, :func:`export_yaml`, :func:`export_csv`,
  :func:`export_history_csv`, :func:`export_all` -- export utilities
"""

from fortune_valley.presentation.console import ConsoleDashboard
from fortune_valley.presentation.export import (
    export_all,
    export_csv,
    export_history_csv,
    export_json,
    export_yaml,
)

__all__ = [
    # Console
    "ConsoleDashboard",
    # Export
    "export_all",
    "export_csv",
    "export_history_csv",
    "export_json",
    "export_yaml",
]
