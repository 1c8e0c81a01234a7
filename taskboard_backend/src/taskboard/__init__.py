"""
Taskboard: a server-rendered task manager on FastAPI and MongoDB.

Run with ``python -m taskboard`` or ``uvicorn --factory taskboard.main:create_app``.
"""

__version__ = "0.1.0"
