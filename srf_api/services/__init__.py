"""
Use cases for the forms API.

Routers call these services; services orchestrate the RecordStore and the
mirror repository.
"""
