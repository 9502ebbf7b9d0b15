"""Record filters used with FilterStep.

A filter is a callable ``record -> bool``; returning False drops the record.
Filters may carry a ``priority`` attribute to order themselves within a
FilterStep.
"""
