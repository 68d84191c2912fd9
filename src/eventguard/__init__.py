"""eventguard: find and fix virtual events in C# code."""

__version__ = "0.1.0"
