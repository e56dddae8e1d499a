"""User service.

CRUD over a single user aggregate, with registration facts delivered to
in-process subscribers after the owning transaction commits.
"""

__version__ = "0.1.0"
