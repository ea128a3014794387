"""labcommitr: interactive, config-driven git commit messages."""

__version__ = "0.4.0"
