"""
Service layer.

Validation, pagination and the ride service that orchestrates them over
a storage backend.  API handlers only talk to ``RideService``.
"""
