"""
Testes da API JSON (Flask test_client, sessão em disco temporário, sem rede).
"""
import io

from rotafacil.routes import manifesto as manifesto_routes
from rotafacil.utils import geocoder


def _coordenadas_por_cep(consulta):
    coordenadas = {
        "38400650": {"lat": -18.915, "lng": -48.280},
        "38400734": {"lat": -18.905, "lng": -48.270},
        "38400100": {"lat": -18.920, "lng": -48.275},
    }
    for cep, ponto in coordenadas.items():
        if cep in consulta:
            return {"status": "OK", "coordenadas": ponto, "endereco_formatado": consulta, "provedor": "teste"}
    return {"status": "NOT_FOUND", "coordenadas": None}


def test_processar_texto(client, lista_ect):
    resposta = client.post('/api/manifesto', json={"texto": lista_ect, "localizacao": {"city": "uberlândia", "state": "minas gerais"}})
    assert resposta.status_code == 200
    dados = resposta.get_json()
    assert dados["success"] is True
    assert dados["manifesto"]["reconhecido"] is True
    assert len(dados["manifesto"]["items"]) == 3
    assert dados["consultas"][0] == "Rua Rio Grande do Sul, 956, 38400650, Uberlândia, MG, Brasil"


def test_texto_obrigatorio(client):
    resposta = client.post('/api/manifesto', json={})
    assert resposta.status_code == 400
    assert resposta.get_json()["success"] is False


def test_localizacao_invalida(client, lista_ect):
    resposta = client.post('/api/manifesto', json={"texto": lista_ect, "localizacao": ["MG"]})
    assert resposta.status_code == 400


def test_texto_nao_reconhecido(client):
    dados = client.post('/api/manifesto', json={"texto": "Bom dia, tudo bem?"}).get_json()
    assert dados["manifesto"]["reconhecido"] is False
    assert dados["msg"] == "not a recognizable manifest"


def test_manifesto_fica_na_sessao(client, lista_ect):
    assert client.get('/api/manifesto').status_code == 404
    client.post('/api/manifesto', json={"texto": lista_ect})
    dados = client.get('/api/manifesto').get_json()
    assert dados["manifesto"]["listNumber"] == "OEC2024001"


def test_foto(client, lista_ect, monkeypatch):
    monkeypatch.setattr(
        manifesto_routes, "extrair_texto",
        lambda conteudo, mimetype: {"status": "OK", "texto": lista_ect, "confianca": 0.7, "provedor": "ocr.space"},
    )
    resposta = client.post(
        '/api/manifesto/foto',
        data={"photo": (io.BytesIO(b"jpeg"), "lista.jpg"), "localizacao": '{"city": "Uberlândia", "state": "MG"}'},
        content_type='multipart/form-data',
    )
    assert resposta.status_code == 200
    dados = resposta.get_json()
    assert dados["ocr"]["provedor"] == "ocr.space"
    assert len(dados["manifesto"]["items"]) == 3


def test_foto_ausente(client):
    resposta = client.post('/api/manifesto/foto', data={}, content_type='multipart/form-data')
    assert resposta.status_code == 400


def test_foto_ocr_falhou(client, monkeypatch):
    monkeypatch.setattr(manifesto_routes, "extrair_texto", lambda conteudo, mimetype: {"status": "ALL_PROVIDERS_FAILED", "texto": ""})
    resposta = client.post(
        '/api/manifesto/foto',
        data={"photo": (io.BytesIO(b"jpeg"), "lista.jpg")},
        content_type='multipart/form-data',
    )
    assert resposta.status_code == 502


def test_geocodificar_e_rota(client, lista_ect, monkeypatch):
    monkeypatch.setattr(geocoder, "GEOCODER_PRIORITY", [_coordenadas_por_cep])
    assert client.post('/api/geocodificar').status_code == 404

    client.post('/api/manifesto', json={"texto": lista_ect})
    dados = client.post('/api/geocodificar').get_json()
    assert dados["success"] is True
    assert dados["geocodificados"] == 3
    assert all(item["coordinates"] for item in dados["manifesto"]["items"])

    rota = client.post('/api/rota', json={"origem": {"lat": -18.900, "lng": -48.270}}).get_json()
    assert rota["success"] is True
    assert [p["sequence"] for p in rota["paradas"]] == [2, 1, 3]
    assert rota["metricas"]["distancia_km"] > 0
    assert rota["google_maps_url"].startswith("https://www.google.com/maps/dir/?")


def test_rota_exige_origem(client):
    assert client.post('/api/rota', json={"origem": {"lat": "abc"}}).status_code == 400


def test_rota_sem_coordenadas(client, lista_ect):
    client.post('/api/manifesto', json={"texto": lista_ect})
    resposta = client.post('/api/rota', json={"origem": {"lat": -18.9, "lng": -48.27}})
    assert resposta.status_code == 400


def test_exportar_csv(client, lista_ect):
    assert client.post('/generate').status_code == 404

    client.post('/api/manifesto', json={"texto": lista_ect})
    resposta = client.post('/generate', follow_redirects=True)
    assert resposta.status_code == 200
    assert resposta.mimetype == 'text/csv'
    conteudo = resposta.data.decode('utf-8-sig')
    assert conteudo.splitlines()[0].startswith("sequencia,sequencia_impressa,codigo_objeto")
    assert "Avenida Amazonas, 232" in conteudo


def test_download_expirado(client):
    assert client.get('/download/nao-existe').status_code == 404
