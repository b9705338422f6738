from urllib.parse import parse_qs, urlparse

import pytest

from rotafacil.services.ect.modelos import ItemEntrega
from rotafacil.services.rota import (
    calcular_distancia,
    calcular_metricas,
    gerar_url_google_maps,
    otimizar_rota,
)

ORIGEM = {"lat": 0.0, "lng": 0.0}


def _item(seq, lat, lng):
    return ItemEntrega(sequence=seq, normalized_address=f"Rua {seq}, {seq}", coordinates={"lat": lat, "lng": lng})


def test_distancia_haversine():
    assert calcular_distancia(ORIGEM, ORIGEM) == 0
    # um grau de latitude ~ 111,2 km
    assert calcular_distancia(ORIGEM, {"lat": 1.0, "lng": 0.0}) == pytest.approx(111.19, abs=0.05)


def test_vizinho_mais_proximo():
    itens = [_item(1, 0.0, 0.3), _item(2, 0.0, 0.1), ItemEntrega(sequence=3), _item(4, 0.0, 0.2)]
    rota = otimizar_rota(itens, ORIGEM)
    assert [i.sequence for i in rota] == [2, 4, 1]


def test_metricas():
    rota = [_item(1, 0.0, 0.1)]
    metricas = calcular_metricas(rota, ORIGEM)
    ida_e_volta = 2 * calcular_distancia(ORIGEM, {"lat": 0.0, "lng": 0.1})
    assert metricas["distancia_km"] == pytest.approx(ida_e_volta, abs=0.01)
    assert metricas["tempo_min"] == round(ida_e_volta / 25 * 60 + 3)
    assert calcular_metricas([], ORIGEM) == {"distancia_km": 0.0, "tempo_min": 0}


def test_url_google_maps_circular():
    url = gerar_url_google_maps([_item(1, 0.0, 0.1), _item(2, 0.0, 0.2)], {"lat": -18.9, "lng": -48.2})
    params = parse_qs(urlparse(url).query)
    assert params["origin"] == ["-18.9,-48.2"]
    assert params["destination"] == ["-18.9,-48.2"]
    assert params["waypoints"] == ["Rua 1, 1|Rua 2, 2"]
    assert params["travelmode"] == ["driving"]


def test_url_google_maps_sem_origem():
    params = parse_qs(urlparse(gerar_url_google_maps([_item(1, 0.0, 0.1)])).query)
    assert params["destination"] == ["Rua 1, 1"]
    assert "origin" not in params
    assert gerar_url_google_maps([]) == "https://www.google.com/maps"
