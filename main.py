"""WSGI entrypoint for the FlavorVault application.

Serve the web UI with ``flask --app main run`` or open the terminal menu with
``flask --app main menu``. Both use the ``app`` object defined below.
"""

import logging

from flavorvault import create_app

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app()


__all__ = ["app"]
