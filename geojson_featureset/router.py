"""
router.py
---------

Définition des routes HTTP exposées par l'API ``geojson_featureset``. Ce
module contient la validation des requêtes entrantes, l'appel au
datasource GeoJSON et la normalisation des réponses.

La route principale ``/features`` reçoit un document GeoJSON (en ligne ou
via une URL) par une requête POST, le convertit en entités ponctuelles et
renvoie une réponse JSON contenant le nombre d'entités, leur emprise, le
catalogue des attributs et les entités elles-mêmes, éventuellement
filtrées par une emprise de requête.

Les exceptions sont interceptées afin de renvoyer des erreurs HTTP
cohérentes pour le client.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field, model_validator

from . import __version__
from .datasource import GeoJSONDatasource
from .errors import MalformedInput
from .models import BoundingBox, Feature

logger = logging.getLogger(__name__)


class FeaturesRequest(BaseModel):
    """Schéma Pydantic d'une demande de conversion.

    Attributes
    ----------
    geojson : Optional[str]
        Le document GeoJSON lui-même.
    url : Optional[str]
        L'URL HTTP(S) d'un document GeoJSON à télécharger.
    encoding : str
        L'encodage du document source.
    bbox : Optional[List[float]]
        Emprise ``[minx, miny, maxx, maxy]`` servant à filtrer les entités.

    Exactement un des champs ``geojson`` et ``url`` doit être renseigné.
    """

    geojson: Optional[str] = Field(default=None, description="Document GeoJSON")
    url: Optional[str] = Field(default=None, description="URL d'un document GeoJSON")
    encoding: str = Field(default="utf-8", min_length=1)
    bbox: Optional[List[float]] = Field(default=None, min_length=4, max_length=4)

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "FeaturesRequest":
        if (self.geojson is None) == (self.url is None):
            raise ValueError("Renseignez exactement un des champs 'geojson' ou 'url'")
        return self


class FeatureOut(BaseModel):
    """Une entité ponctuelle telle que renvoyée au client."""

    id: int
    x: float
    y: float
    declared_type: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_feature(cls, feature: Feature) -> "FeatureOut":
        return cls(
            id=feature.id,
            x=feature.geometry.x,
            y=feature.geometry.y,
            declared_type=feature.declared_type,
            properties=dict(feature.properties),
        )


class FeaturesResponse(BaseModel):
    """Schéma Pydantic décrivant la structure de la réponse.

    Attributes
    ----------
    count : int
        Nombre d'entités renvoyées (après filtrage éventuel).
    total : int
        Nombre d'entités présentes dans le document.
    envelope : Optional[List[float]]
        Emprise de toutes les entités, ``None`` si le document est vide.
    fields : Dict[str, str]
        Nom de chaque attribut et type de sa dernière valeur.
    features : List[FeatureOut]
        Les entités elles-mêmes, dans l'ordre du document.
    """

    count: int
    total: int
    envelope: Optional[List[float]] = None
    fields: Dict[str, str] = Field(default_factory=dict)
    features: List[FeatureOut] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    version: str


# Instanciation du routeur principal. Tous les endpoints sont ajoutés à ce router.
api_router = APIRouter(prefix="", tags=["features"])


@api_router.get("/health", response_model=HealthResponse, summary="État du service")
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@api_router.post(
    "/features",
    response_model=FeaturesResponse,
    summary="Convertir un document GeoJSON en entités ponctuelles",
    response_description="Entités extraites du document, éventuellement filtrées par emprise",
)
def features_endpoint(payload: FeaturesRequest) -> FeaturesResponse:
    """Point d'entrée HTTP pour la conversion d'un document GeoJSON.

    Le traitement est synchrone : FastAPI l'exécute dans son pool de
    threads, l'analyse complète du document ayant lieu avant la réponse.

    :param payload: requête contenant le document ou son URL
    :returns: une instance de :class:`FeaturesResponse`
    :raises HTTPException: 400 si le document ou les paramètres sont
                           invalides, 502 si le téléchargement échoue
    """

    try:
        query_box = BoundingBox.from_sequence(payload.bbox) if payload.bbox is not None else None
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        datasource = GeoJSONDatasource(
            url=payload.url,
            inline=payload.geojson,
            encoding=payload.encoding,
        )
    except MalformedInput as exc:
        # Document GeoJSON invalide : erreur du client
        logger.info("Document GeoJSON rejeté : %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ValueError as exc:
        # Encodage inconnu ou URL invalide
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RuntimeError as exc:
        logger.warning("Téléchargement impossible pour %s : %s", payload.url, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    selected = [FeatureOut.from_feature(f) for f in datasource.features(query_box)]
    envelope = datasource.envelope()
    return FeaturesResponse(
        count=len(selected),
        total=len(datasource),
        envelope=None if envelope.is_empty else envelope.as_list(),
        fields=datasource.fields(),
        features=selected,
    )
