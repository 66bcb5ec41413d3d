"""
Authentication application.

Owns the User identity consumed by chat and notifications, and the JWT
token endpoints.
"""
