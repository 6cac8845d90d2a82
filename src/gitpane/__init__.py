"""gitpane — typed models of git's diff, status, and rebase output."""

__version__ = "0.1.0"
