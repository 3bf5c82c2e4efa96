"""
Service layer: business rules over the repositories.

Services own transaction boundaries and return ServiceResult objects;
they never raise for expected failures.
"""
