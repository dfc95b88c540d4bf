"""Core logic for sysupdate: comparison, decisions, sessions and actions."""
