"""
Entrypoint for running the API in development.
In production run create_app() under a WSGI server (gunicorn/uwsgi).
"""
import logging
import os

from . import create_app

app = create_app()

if __name__ == "__main__":
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "3000"))
    debug = bool(app.config.get("DEBUG", False))
    logging.getLogger(__name__).info("Swagger UI available at http://%s:%s/apidocs/", host, port)
    app.run(host=host, port=port, debug=debug)
