"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration, connection management and query timeouts
- errors: Domain error types rendered by the API layer
- security: Authentication, password hashing and the auth cookie
"""
