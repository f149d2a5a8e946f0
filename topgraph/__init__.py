"""Terminal activity monitor building blocks: configuration, data sources, layout parsing and widgets."""

__version__ = "4.0.0"