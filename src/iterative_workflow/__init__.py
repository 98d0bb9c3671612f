"""iterative-workflow CLI entry point.

This package installs the iterative multi-agent workflow templates (agents,
commands and skills) into a project's .claude/ directory. See
`iterative-workflow --help` for details.
"""
