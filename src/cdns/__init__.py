"""cdns - switch the DNS servers of a Linux host."""

__version__ = "0.4.0"
