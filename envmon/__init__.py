"""Environmental monitoring dashboard: API client, controllers and presentation helpers."""

__version__ = "0.3.0"
