"""maestro-k: list vector databases and validate YAML configuration."""

__version__ = "0.1.0"
