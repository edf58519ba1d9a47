"""Building blocks for services: ordered maps, conversions, per-thread context, stats and perf counters."""

__version__ = "0.1.0"