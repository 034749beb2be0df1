"""confbk - Easily back up important configuration files."""

__version__ = "0.1.0"
