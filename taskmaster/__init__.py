"""TaskMaster: multi-user task tracking REST API."""

__version__ = "1.0.0"
