"""aiOS CLI daemon supervisor

Starts, tracks and stops the managed CLI's background daemon through a PID
sentinel file, and passes other subcommands through to the managed CLI.
"""

__version__ = "1.0.0"
