"""trialbench: compare a baseline and a candidate implementation by timing them."""

__version__ = "0.1.0"
