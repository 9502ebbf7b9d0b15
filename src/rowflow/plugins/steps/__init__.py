"""Built-in pipeline steps for rowflow.

Steps transform, filter or validate records and hand them on to the rest of
the chain. The type guard and sink steps are appended by the pipeline builder
and are not registered by users.
"""
