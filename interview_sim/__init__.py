"""
interview-sim - Interview session client

Drives a question/response interview against a remote question-generation
service and keeps the session going from a local question bank when the
service cannot be reached.
"""

__version__ = "0.1.0"
