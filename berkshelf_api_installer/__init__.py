"""Install and configure Berkshelf API servers."""

__version__ = "0.1.0"
