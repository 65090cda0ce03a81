"""streamcollect: subscribe to aggregator sample streams and print them."""

__version__ = "0.1.0"
