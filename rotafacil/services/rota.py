# rotafacil/services/rota.py
"""
Ordenação simples de rota (vizinho mais próximo) a partir da posição do carteiro.

Não é um roteirizador: a distância é em linha reta (Haversine). Serve para
dar uma ordem razoável de entrega e gerar o link do Google Maps.
"""
import logging
import math
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlencode

from rotafacil.services.ect.modelos import ItemEntrega

logger = logging.getLogger(__name__)

RAIO_TERRA_KM = 6371
VELOCIDADE_MEDIA_KMH = 25
MINUTOS_POR_PARADA = 3
GOOGLE_MAPS_DIR = "https://www.google.com/maps/dir/?"


def calcular_distancia(ponto1: Dict[str, float], ponto2: Dict[str, float]) -> float:
    """Distância Haversine em km entre dois pontos {'lat', 'lng'}."""
    d_lat = math.radians(ponto2['lat'] - ponto1['lat'])
    d_lng = math.radians(ponto2['lng'] - ponto1['lng'])
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(ponto1['lat'])) * math.cos(math.radians(ponto2['lat']))
         * math.sin(d_lng / 2) ** 2)
    return RAIO_TERRA_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def otimizar_rota(itens: Sequence[ItemEntrega], origem: Dict[str, float]) -> List[ItemEntrega]:
    """
    Ordena os itens com coordenadas pelo vizinho mais próximo, partindo da origem.
    Itens sem coordenadas ficam de fora da rota.
    """
    pendentes = [item for item in itens if item.coordinates]
    rota = []
    atual = origem
    while pendentes:
        # min() devolve o primeiro em caso de empate, mantendo a ordem da lista
        proximo = min(pendentes, key=lambda item: calcular_distancia(atual, item.coordinates))
        pendentes.remove(proximo)
        rota.append(proximo)
        logger.debug(f"📍 Próxima parada: {proximo.normalized_address} ({calcular_distancia(atual, proximo.coordinates):.2f} km)")
        atual = proximo.coordinates
    return rota


def calcular_metricas(rota: Sequence[ItemEntrega], origem: Optional[Dict[str, float]]) -> Dict[str, float]:
    """Distância total (ida e volta à origem) e tempo estimado em minutos."""
    if not origem or not rota:
        return {"distancia_km": 0.0, "tempo_min": 0}

    distancia = 0.0
    atual = origem
    for item in rota:
        if item.coordinates:
            distancia += calcular_distancia(atual, item.coordinates)
            atual = item.coordinates
    distancia += calcular_distancia(atual, origem)

    tempo = (distancia / VELOCIDADE_MEDIA_KMH) * 60 + len(rota) * MINUTOS_POR_PARADA
    return {"distancia_km": round(distancia, 2), "tempo_min": int(round(tempo))}


def _endereco_parada(item: ItemEntrega) -> Optional[str]:
    if item.normalized_address:
        return item.normalized_address
    if item.coordinates:
        return f"{item.coordinates['lat']},{item.coordinates['lng']}"
    return None


def gerar_url_google_maps(rota: Sequence[ItemEntrega], origem: Optional[Dict[str, float]] = None) -> str:
    """Link de direções do Google Maps; com origem, a rota é circular (sai e volta ao carteiro)."""
    paradas = [p for p in (_endereco_parada(item) for item in rota) if p]
    if not paradas:
        return "https://www.google.com/maps"

    if origem:
        ponto = f"{origem['lat']},{origem['lng']}"
        params = {"api": "1", "origin": ponto, "destination": ponto, "waypoints": '|'.join(paradas)}
    elif len(paradas) == 1:
        params = {"api": "1", "destination": paradas[0]}
    else:
        params = {
            "api": "1",
            "origin": paradas[0],
            "destination": paradas[-1],
            "waypoints": '|'.join(paradas[1:-1]),
        }
    params["travelmode"] = "driving"
    return GOOGLE_MAPS_DIR + urlencode(params)
