"""Worker runner for datafetch Temporal components.

Every deployment runs the same image; the component name given on the command
line (or in COMPONENT) selects which activities the worker exposes.
"""
