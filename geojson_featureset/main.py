"""
main.py
---------

Point d'entrée pour l'API REST du projet ``geojson_featureset``.
Ce module instancie une application FastAPI, configure les métadonnées
de documentation, la journalisation, et branche les routes définies dans
``router.py``.

À l'exécution, vous pouvez démarrer l'API avec ``uvicorn`` ou tout
autre serveur ASGI :

    uvicorn geojson_featureset.main:app --reload

Le module ne contient volontairement aucune logique métier : il se
contente de déclarer l'application et de brancher les composants.
"""

from __future__ import annotations

import os

from fastapi import FastAPI

from . import __version__
from .router import api_router
from .utils.logging_utils import configure_logging


def create_app() -> FastAPI:
    """Crée et configure l'application FastAPI.

    Cette fonction est isolée afin de faciliter les tests unitaires et
    d'autoriser une configuration plus fine (middlewares, CORS, etc.) si
    nécessaire. Le niveau de journalisation est lu dans la variable
    d'environnement ``GEOJSON_FEATURESET_LOG_LEVEL`` (``INFO`` par défaut).

    :returns: une instance de :class:`~fastapi.FastAPI` prête à être
              servie.
    """
    configure_logging(os.getenv("GEOJSON_FEATURESET_LOG_LEVEL", "INFO").upper())

    app = FastAPI(
        title="GeoJSON Featureset API",
        description=(
            "API REST convertissant des collections d'entités GeoJSON en "
            "entités ponctuelles typées, avec filtrage optionnel par emprise."
        ),
        version=__version__,
    )

    # Inclure les routes exposées par le router principal.
    app.include_router(api_router)
    return app


# Instance globale de l'application, importée par les serveurs ASGI
app = create_app()


if __name__ == "__main__":  # pragma: no cover
    # Permet de lancer l'application directement avec ``python -m geojson_featureset.main``
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
