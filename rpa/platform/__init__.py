"""Operating system integration."""

from rpa.platform.process import ProcessError, run, run_interactive

__all__ = ["ProcessError", "run", "run_interactive"]
