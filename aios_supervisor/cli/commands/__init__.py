"""
CLI commands, grouped by concern:
- service: daemon lifecycle (start, stop, restart, status, logs)
- aios: pass-through managed CLI subcommands
"""

from .service import service_commands
from .aios import aios_commands, models_group, hive_group

__all__ = [
    'service_commands',
    'aios_commands',
    'models_group',
    'hive_group',
]
