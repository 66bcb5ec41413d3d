"""
WSGI config for the messaging backend.

The project is served through ASGI (config.asgi) so the realtime channel is
available. WSGI only serves the REST API and admin, for tooling that cannot
speak ASGI.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
