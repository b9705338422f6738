# rotafacil/utils/nominatim.py
"""
Geocodificação via Nominatim (OpenStreetMap), provedor gratuito e preferencial.
A política de uso exige um User-Agent identificável.
"""
import os

import requests

from .mapbox import coordenada_no_brasil

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
USER_AGENT_PADRAO = "RotaFacil/1.0 (contato@rotafacil.com)"


def _confianca(resultado):
    """Confiança pelo tipo do objeto OSM encontrado."""
    confianca = 0.5
    if resultado.get('osm_type') == 'way':
        confianca = 0.7
    if resultado.get('class') == 'building':
        confianca = 0.8
    if resultado.get('type') == 'house':
        confianca = 0.9
    return confianca


def geocodificar_nominatim(consulta):
    params = {
        "format": "json",
        "q": consulta,
        "countrycodes": "br",
        "limit": 1,
        "addressdetails": 1,
    }
    headers = {
        "User-Agent": os.environ.get("NOMINATIM_USER_AGENT", USER_AGENT_PADRAO),
        "Accept-Language": "pt-BR,pt;q=0.9",
    }
    try:
        r = requests.get(NOMINATIM_URL, params=params, headers=headers, timeout=7)
        r.raise_for_status()
        data = r.json()
    except requests.Timeout:
        return {"status": "TIMEOUT", "coordenadas": None}
    except requests.RequestException as e:
        return {"status": f"ERRO: {e}", "coordenadas": None}

    if not isinstance(data, list) or not data:
        return {"status": "NOT_FOUND", "coordenadas": None}

    resultado = data[0]
    lat, lng = float(resultado['lat']), float(resultado['lon'])
    if not coordenada_no_brasil(lat, lng):
        return {"status": "FORA_DO_BRASIL", "coordenadas": None}

    endereco = resultado.get('address', {})
    return {
        "status": "OK",
        "coordenadas": {"lat": lat, "lng": lng},
        "endereco_formatado": resultado.get('display_name', ''),
        "postal_code_encontrado": endereco.get('postcode', ''),
        "confianca": _confianca(resultado),
        "provedor": "nominatim",
    }
