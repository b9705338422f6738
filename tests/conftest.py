import pytest

from rotafacil import create_app


class ConfigTeste:
    TESTING = True
    SECRET_KEY = "chave-de-teste"
    FLASK_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_TYPE = "filesystem"
    SESSION_PERMANENT = False
    SESSION_COOKIE_NAME = "rotafacil_teste"
    SESSION_COOKIE_SECURE = False
    CIDADE_PADRAO = "Uberlândia"
    UF_PADRAO = "MG"
    ECT_CODIGOS_TRANSPORTADORA = ["MI", "OY", "MJ", "MT", "TJ"]
    GEOCODING_DELAY = 0.0


@pytest.fixture
def app(tmp_path):
    class Config(ConfigTeste):
        SESSION_FILE_DIR = str(tmp_path / "sessoes")

    return create_app(Config)


@pytest.fixture
def client(app):
    return app.test_client()


# Lista ECT real (anonimizada), como devolvida pelo OCR
LISTA_ECT = """ECT LISTA DE OBJETOS ENTREGUES AO CARTEIRO
Lista: OEC2024001
Unidade: 12345 - CDD UBERLANDIA
Distrito: 07
Carteiro: 998877
Data: 15/03/2024
UBERLANDIA - MG/BR
013 AC 973 482 100 BR 13-
CEP: 38400650
Rua Rio Grande do Sul - de 240/241 a 1533/1534, 956 CEP: 38400650
016 BW 147 223 312 BR X 16-
CEP: 38400734
Avenida Amazonas - até 1469/1470, 232 CEP: 38400734
017 AC 555 666 777 BR 17-
Endereço: Rua Goiás, 100
CEP: 38400100
"""


@pytest.fixture
def lista_ect():
    return LISTA_ECT
