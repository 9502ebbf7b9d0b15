"""Built-in sink plugins for rowflow.

Sinks consume fully processed records. Multiple sinks per workflow.

Registered sinks are accessed via PluginManager:
    manager = PluginManager()
    manager.register_builtin_plugins()
    sink_cls = manager.get_sink_by_name("jsonl")
"""
