"""
Testes da cascata de geocodificação (sem rede: provedores substituídos via monkeypatch).
"""
import pytest
import requests

from rotafacil.models import CacheGeocodificacao
from rotafacil.services.ect.modelos import ItemEntrega
from rotafacil.utils import geocoder, nominatim

CHAMADAS = []


def provedor_ok(consulta):
    CHAMADAS.append(("ok", consulta))
    return {"status": "OK", "coordenadas": {"lat": -18.91, "lng": -48.27},
            "endereco_formatado": consulta, "confianca": 0.9, "provedor": "teste"}


def provedor_vazio(consulta):
    CHAMADAS.append(("vazio", consulta))
    return {"status": "NOT_FOUND", "coordenadas": None}


def provedor_quebrado(consulta):
    CHAMADAS.append(("quebrado", consulta))
    raise RuntimeError("resposta inesperada")


@pytest.fixture(autouse=True)
def limpar_chamadas():
    CHAMADAS.clear()


def test_cascata_usa_o_primeiro_que_encontra(monkeypatch):
    monkeypatch.setattr(geocoder, "GEOCODER_PRIORITY", [provedor_vazio, provedor_quebrado, provedor_ok])
    resultado = geocoder.geocodificar("Rua Goiás, 100, Uberlândia, MG, Brasil")
    assert resultado["status"] == "OK"
    assert [nome for nome, _ in CHAMADAS] == ["vazio", "quebrado", "ok"]


def test_todos_falham(monkeypatch):
    monkeypatch.setattr(geocoder, "GEOCODER_PRIORITY", [provedor_vazio, provedor_quebrado])
    resultado = geocoder.geocodificar("Rua Inexistente, 1")
    assert resultado["status"] == "ALL_PROVIDERS_FAILED"
    assert resultado["coordenadas"] is None
    assert len(resultado["erros"]) == 2


def test_coordenadas_ou_erro_em_cada_item(monkeypatch):
    def por_cep(consulta):
        return provedor_ok(consulta) if "38400100" in consulta else provedor_vazio(consulta)

    monkeypatch.setattr(geocoder, "GEOCODER_PRIORITY", [por_cep])
    itens = [
        ItemEntrega(sequence=1, raw_address_line="Rua Goiás, 100", normalized_address="Rua Goiás, 100", cep="38400100"),
        ItemEntrega(sequence=2, raw_address_line="Rua Perdida, 1", normalized_address="Rua Perdida, 1", cep="38400999"),
        ItemEntrega(sequence=3),
    ]

    resultado = geocoder.geocodificar_itens(itens)

    assert len(resultado) == 3
    for item in resultado:
        assert (item.coordinates is None) != (item.geocoding_error is None)
    assert resultado[0].coordinates == {"lat": -18.91, "lng": -48.27}
    assert resultado[1].geocoding_error == "ALL_PROVIDERS_FAILED"
    assert resultado[2].geocoding_error == "SEM_ENDERECO"
    # item sem endereço nem CEP não gera consulta
    assert len(CHAMADAS) == 2


def test_cache_evita_nova_consulta(app, monkeypatch):
    monkeypatch.setattr(geocoder, "GEOCODER_PRIORITY", [provedor_ok])
    with app.app_context():
        primeiro = geocoder.geocodificar("Rua Goiás, 100, Uberlândia, MG, Brasil")
        segundo = geocoder.geocodificar("rua goias 100 uberlandia mg brasil")

        assert primeiro["status"] == "OK"
        assert segundo["cache"] is True
        assert segundo["coordenadas"] == primeiro["coordenadas"]
        assert len(CHAMADAS) == 1
        assert CacheGeocodificacao.query.one().hits == 2


def test_erro_ao_gravar_no_cache_mantem_o_resultado(app, monkeypatch):
    consulta = "Rua Goiás, 100, Uberlândia, MG, Brasil"
    monkeypatch.setattr(geocoder, "GEOCODER_PRIORITY", [provedor_ok, provedor_vazio])
    buscar_no_cache = geocoder.buscar_no_cache
    with app.app_context():
        geocoder.geocodificar(consulta)

        # outro worker gravou a mesma consulta entre a busca e a gravação
        monkeypatch.setattr(geocoder, "buscar_no_cache", lambda consulta: None)
        resultado = geocoder.geocodificar(consulta)
        assert resultado["status"] == "OK"
        assert resultado["provedor"] == "teste"
        assert [nome for nome, _ in CHAMADAS] == ["ok", "ok"]

        # a sessão foi desfeita e continua utilizável
        monkeypatch.setattr(geocoder, "buscar_no_cache", buscar_no_cache)
        assert geocoder.geocodificar(consulta)["cache"] is True
        assert CacheGeocodificacao.query.count() == 1


def test_falha_nao_vai_para_o_cache(app, monkeypatch):
    monkeypatch.setattr(geocoder, "GEOCODER_PRIORITY", [provedor_vazio])
    with app.app_context():
        geocoder.geocodificar("Rua Perdida, 1")
        assert CacheGeocodificacao.query.count() == 0


# ─── Provedor Nominatim (requests simulado) ───────────────────────────────────

class RespostaFalsa:
    def __init__(self, dados, status_code=200):
        self.dados = dados
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self.dados


def test_nominatim_ok(monkeypatch):
    dados = [{"lat": "-18.9186", "lon": "-48.2772", "display_name": "Rua Goiás, Uberlândia",
              "osm_type": "way", "class": "highway", "type": "residential", "address": {"postcode": "38400-100"}}]
    monkeypatch.setattr(nominatim.requests, "get", lambda *a, **k: RespostaFalsa(dados))
    resultado = nominatim.geocodificar_nominatim("Rua Goiás, 100")
    assert resultado["status"] == "OK"
    assert resultado["coordenadas"] == {"lat": -18.9186, "lng": -48.2772}
    assert resultado["confianca"] == 0.7


def test_nominatim_fora_do_brasil(monkeypatch):
    dados = [{"lat": "38.72", "lon": "-9.14", "display_name": "Lisboa"}]
    monkeypatch.setattr(nominatim.requests, "get", lambda *a, **k: RespostaFalsa(dados))
    assert nominatim.geocodificar_nominatim("Rua Goiás, 100")["status"] == "FORA_DO_BRASIL"


def test_nominatim_timeout(monkeypatch):
    def estoura(*args, **kwargs):
        raise requests.Timeout("demorou")

    monkeypatch.setattr(nominatim.requests, "get", estoura)
    assert nominatim.geocodificar_nominatim("Rua Goiás, 100")["status"] == "TIMEOUT"
