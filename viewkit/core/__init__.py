# viewkit/core/__init__.py
"""
Compilation, caching and composition core: file sources, naming, the function
table, template backends, the registry compiler and the render engine.
"""
