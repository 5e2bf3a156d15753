"""prio - Priority-tagged task lists for the terminal."""

__version__ = "0.1.0"
