"""sysupdate - version checks and guided updates for Linux workstations."""

__version__ = "0.3.0"
