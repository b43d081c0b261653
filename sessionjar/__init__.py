"""Client-side session cookie jar for HTTP clients without one."""

__version__ = "0.1.0"
