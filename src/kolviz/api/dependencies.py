"""Route dependency on the parsed session log.

Every route reads the one log parsed at startup. The log is only known once
``create_app`` runs, so the routes depend on ``get_repository`` and the app
overrides it with a repository over that log.
"""

from kolviz.api.repository import LogRepository


def get_repository() -> LogRepository:
    """
    Repository over the parsed log and its summary.

    Raises:
        RuntimeError: If the app was not built by create_app, so no log is loaded
    """
    raise RuntimeError("No parsed log loaded; build the app with create_app()")
