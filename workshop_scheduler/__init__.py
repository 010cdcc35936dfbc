"""Staff-to-workshop scheduling engine for 10-week, Monday-Thursday programmes."""

__version__ = "0.1.0"
