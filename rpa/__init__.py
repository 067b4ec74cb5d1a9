"""Gitflow release automation with Jira version synchronization."""

__version__ = "0.3.0"
