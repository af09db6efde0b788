"""HTTP file-management server with a uniform JSON response format."""

__version__ = "0.1.0"