# rotafacil/utils/mapbox.py

import requests
from urllib.parse import quote
import os

MAPBOX_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"

# Limites aproximados do território brasileiro
LIMITES_BRASIL = {"lat": (-33.7, 5.3), "lng": (-73.9, -28.8)}


def coordenada_no_brasil(lat, lng):
    return (LIMITES_BRASIL["lat"][0] <= lat <= LIMITES_BRASIL["lat"][1]
            and LIMITES_BRASIL["lng"][0] <= lng <= LIMITES_BRASIL["lng"][1])


def _token():
    return os.environ.get("MAPBOX_TOKEN", "")


def _busca_geocode_mapbox(query):
    url = MAPBOX_URL.format(query=quote(query, safe=''))
    params = {
        "access_token": _token(),
        "country": "BR",
        "types": "address,poi",
        "language": "pt",
        "limit": 1
    }
    r = requests.get(url, params=params, timeout=7)
    r.raise_for_status()
    return r.json().get('features', [])


def geocodificar_mapbox(consulta):
    """
    Geocodifica a consulta completa no Mapbox, restrito ao Brasil.
    Sem token configurado o provedor é pulado (status SEM_TOKEN).
    """
    if not _token():
        return {"status": "SEM_TOKEN", "coordenadas": None}

    try:
        features = _busca_geocode_mapbox(consulta)
    except requests.Timeout:
        return {"status": "TIMEOUT", "coordenadas": None}
    except requests.RequestException as e:
        return {"status": f"ERRO: {e}", "coordenadas": None}

    if not features:
        return {"status": "NOT_FOUND", "coordenadas": None}

    feat = features[0]
    lat, lng = float(feat['center'][1]), float(feat['center'][0])
    if not coordenada_no_brasil(lat, lng):
        return {"status": "FORA_DO_BRASIL", "coordenadas": None}

    def get_context(ctx_id):
        return next((c['text'] for c in feat.get('context', []) if c['id'].startswith(ctx_id)), "")

    return {
        "status": "OK",
        "coordenadas": {"lat": lat, "lng": lng},
        "endereco_formatado": feat.get('place_name', ''),
        "postal_code_encontrado": get_context("postcode"),
        "confianca": float(feat.get('relevance', 0.8)),
        "provedor": "mapbox",
    }
