"""buldr - declarative build orchestrator for C/C++ projects."""

__version__ = "0.1.0"
