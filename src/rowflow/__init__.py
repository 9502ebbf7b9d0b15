"""
rowflow: streaming, row-oriented data transformation pipelines.

Records are pulled one at a time from a reader, pushed through a
priority-ordered chain of steps and handed to one or more sinks.
"""

__version__ = "0.1.0"
