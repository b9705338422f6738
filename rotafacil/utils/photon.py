# rotafacil/utils/photon.py

import requests

from .mapbox import coordenada_no_brasil

PHOTON_URL = "https://photon.komoot.io/api/"


def geocodificar_photon(consulta):
    """Photon (Komoot): mesma base OSM do Nominatim, com busca mais tolerante a erros de digitação."""
    params = {"q": consulta, "limit": 1}
    try:
        r = requests.get(PHOTON_URL, params=params, timeout=5)
        r.raise_for_status()
        features = r.json().get('features', [])
    except requests.Timeout:
        return {"status": "TIMEOUT", "coordenadas": None}
    except requests.RequestException as e:
        return {"status": f"ERRO: {e}", "coordenadas": None}

    if not features:
        return {"status": "NOT_FOUND", "coordenadas": None}

    feature = features[0]
    lng, lat = (float(c) for c in feature['geometry']['coordinates'])
    if not coordenada_no_brasil(lat, lng):
        return {"status": "FORA_DO_BRASIL", "coordenadas": None}

    props = feature.get('properties', {})
    partes = [props.get('name'), props.get('street'), props.get('city'), props.get('state')]
    return {
        "status": "OK",
        "coordenadas": {"lat": lat, "lng": lng},
        "endereco_formatado": ', '.join(p for p in partes if p),
        "postal_code_encontrado": props.get('postcode', ''),
        "confianca": 0.6,
        "provedor": "photon",
    }
