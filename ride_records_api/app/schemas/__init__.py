"""
Pydantic schema definitions for API payloads.

Schemas are separated from the storage backends so the API
representation does not depend on how a backend names its fields.
"""
