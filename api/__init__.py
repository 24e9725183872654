"""
api/ - Transport Layer
======================
Owns the shared HTTP client used to reach the subscriptions API.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
