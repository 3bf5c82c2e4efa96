"""
Guest accommodation service.

Stay requests, room assignments, check-in/check-out and meal passes
for a residential facility.
"""

__version__ = "0.1.0"
