"""Multi-user project and task tracker."""

__version__ = "1.0.0"
