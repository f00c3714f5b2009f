"""
Test suite for the Carebook appointment API.

Contains unit tests for the access policy and status transitions, service
tests against a SQLite session, and end-to-end API tests.
"""
