"""coinwatch - threshold alerts on cryptocurrency prices."""

__version__ = "0.1.0"
