"""
Carebook

A FastAPI-based appointment booking API for patients, doctors and
administrators, with JWT authentication and role-scoped access to
appointments.
"""

__version__ = "1.0.0"
