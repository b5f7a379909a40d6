"""
WSGI compatibility layer.

Wraps the ASGI trading API for WSGI servers such as Gunicorn
or Waitress. Prefer running ``app.main:app`` under uvicorn.
"""

from asgiref.wsgi import AsgiToWsgi

from app.main import app

# WSGI entry point: ``gunicorn app.wsgi:application``
application = AsgiToWsgi(app)
