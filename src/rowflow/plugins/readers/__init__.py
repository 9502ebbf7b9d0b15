"""Built-in row readers for rowflow.

Readers produce records one at a time through the cursor contract in
rowflow.plugins.protocols. Exactly one reader per workflow; composite readers
(append, merge-join) wrap other readers.

Registered readers are accessed via PluginManager:
    manager = PluginManager()
    manager.register_builtin_plugins()
    reader_cls = manager.get_reader_by_name("csv")
"""
