"""UnionCloud API client.

Python wrapper for the UnionCloud membership and elections service. Handles
token authentication, request signing and response normalization for the
users, groups, events and elections endpoints.
"""

__version__ = "0.1.1"
