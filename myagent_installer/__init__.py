"""myagent installer — install, upgrade, and remove the myagent CLI."""

__version__ = "0.1.0"
