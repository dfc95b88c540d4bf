"""Package operators for executing package manager commands.

This module provides the APT operator used for upgrades, kept-back
remediation and policy queries.
"""

from sysupdate.operators.apt import AptOperator

__all__ = ["AptOperator"]
