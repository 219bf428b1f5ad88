"""Download the photos and videos attached to HiMama activities."""

__version__ = "0.0.3"
__all__ = ["activity", "client", "cli"]