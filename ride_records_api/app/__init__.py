"""
Application package initializer.

Contains the main entrypoint for the API and its submodules: ``core``
(configuration, logging, errors, database helpers), ``schemas``
(pydantic models), ``services`` (validation, pagination and the ride
service), ``storage`` (the interchangeable backends) and ``api``
(versioned routers).
"""

from .main import app  # noqa: F401
