"""The Science Brief - journal feed aggregation and pitch scoring."""

__version__ = "1.0.0"
