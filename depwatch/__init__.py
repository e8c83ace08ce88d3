"""depwatch — manifest dependency extraction and latest-version report."""

__version__ = "1.0.0"
