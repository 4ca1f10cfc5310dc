"""storEDGE API client.

Python client for the storEDGE self-storage facility management REST API,
with OAuth 1.0 signed requests and JSON responses.
"""

__version__ = "0.1.0"
