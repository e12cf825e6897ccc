"""
aksk: access-key / secret-key request signing.

Clients sign outgoing HTTP requests with a shared secret; servers verify the
HMAC signature and timestamp window before handing the request to
application code.
"""

__version__ = "1.0.0"
