"""
Tests for notifications app.

This package contains test modules for:
- test_preferences.py: PreferenceResolver tests
- test_push.py: Expo push client tests
- test_services.py: Fan-out, device and preference service tests
- test_tasks.py: Message notification task tests
- test_views.py: API endpoint tests

Usage:
    pytest notifications/tests/
    pytest notifications/tests/test_services.py
"""
