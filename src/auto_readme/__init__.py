"""auto_readme: scan a project and build the context for a generated README."""

__version__ = "0.1.0"
