"""
namecheck rules package.

Each module in this package exposes a ``RULES`` list; the engine registry
discovers them with ``discover_rules(["namecheck.rules"])``.

To add a new rule:
1. Create a module in this directory (e.g., my_rule.py)
2. Define a class with ``meta`` and ``visit(ctx)``
3. Add an instance to a module-level ``RULES`` list
"""
