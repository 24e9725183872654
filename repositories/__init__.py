"""
repositories/ - Data Access Layer
==================================
Each repository wraps the HTTP calls for one remote resource.
Repositories receive raw JSON from the API and return domain model objects.
"""
