"""
Testes de ponta a ponta do extrator: texto do OCR -> Manifesto.
"""
from rotafacil.services.ect import extrair_manifesto
from rotafacil.services.ect.cabecalho import extrair_metadados, parece_lista_ect
from rotafacil.services.ect.modelos import MENSAGEM_NAO_RECONHECIDO


def test_faixa_com_hifen_de_a():
    texto = (
        "013 AC 973 482 100 BR 13-\n"
        "CEP: 38400650\n"
        "Rua Rio Grande do Sul - de 240/241 a 1533/1534, 956 CEP: 38400650"
    )
    manifesto = extrair_manifesto(texto)
    assert len(manifesto.items) == 1
    item = manifesto.items[0]
    assert "AC 973 482 100 BR" in item.object_code
    assert item.cep == "38400650"
    assert item.normalized_address == "Rua Rio Grande do Sul, 956"


def test_faixa_com_hifen_ate():
    texto = (
        "016 BW 147 223 312 BR 16-\n"
        "CEP: 38400734\n"
        "Avenida Amazonas - até 1469/1470, 232 CEP: 38400734"
    )
    item = extrair_manifesto(texto).items[0]
    assert item.normalized_address == "Avenida Amazonas, 232"
    assert item.cep == "38400734"


def test_faixa_quebrada_pelo_ocr_e_resolvida_no_item():
    texto = (
        "013 AC 973 482 100 BR 13-\n"
        "CEP: 38400650\n"
        "Rua Rio Grande do Sul - de 240/241\n"
        "a 1533/1534, 956 CEP: 38400650"
    )
    item = extrair_manifesto(texto).items[0]
    assert item.normalized_address == "Rua Rio Grande do Sul, 956"
    assert item.range_unresolved is False
    assert item.cep == "38400650"


def test_faixa_ate_quebrada_pelo_ocr_e_resolvida_no_item():
    texto = (
        "016 BW 147 223 312 BR 16-\n"
        "CEP: 38400734\n"
        "Avenida Amazonas - até\n"
        "1469/1470, 232 CEP: 38400734"
    )
    item = extrair_manifesto(texto).items[0]
    assert item.normalized_address == "Avenida Amazonas, 232"
    assert item.range_unresolved is False


def test_faixa_quebrada_sem_endereco_limpo_fica_sinalizada():
    texto = (
        "013 AC 973 482 100 BR 13-\n"
        "CEP: 38400650\n"
        "Rua Rio Grande do Sul - de 240/241"
    )
    item = extrair_manifesto(texto).items[0]
    assert item.range_unresolved is True
    assert item.precisa_revisao is True


def test_texto_sem_codigos_nao_e_reconhecido():
    manifesto = extrair_manifesto("Bom dia\nRua Goiás, 100\nCEP: 38400100")
    assert manifesto.items == []
    assert not manifesto.reconhecido
    assert manifesto.mensagem == MENSAGEM_NAO_RECONHECIDO


def test_texto_vazio():
    manifesto = extrair_manifesto("")
    assert not manifesto.reconhecido
    assert extrair_manifesto(None).items == []


def test_codigos_consecutivos_sem_endereco_viram_um_item():
    texto = (
        "001 AC 111 222 333 BR 1-\n"
        "002 AC 444 555 666 BR 2-\n"
        "Rua Goiás, 100\n"
        "CEP: 38400100"
    )
    itens = extrair_manifesto(texto).items
    assert len(itens) == 1
    assert itens[0].object_code == "AC 111 222 333 BR"


def test_lista_completa(lista_ect):
    manifesto = extrair_manifesto(lista_ect)

    assert manifesto.reconhecido
    assert [i.normalized_address for i in manifesto.items] == [
        "Rua Rio Grande do Sul, 956",
        "Avenida Amazonas, 232",
        "Rua Goiás, 100",
    ]
    assert [i.cep for i in manifesto.items] == ["38400650", "38400734", "38400100"]
    assert [i.printed_sequence for i in manifesto.items] == [13, 16, 17]
    assert [i.sequence for i in manifesto.items] == [1, 2, 3]
    assert [i.ar_required for i in manifesto.items] == [False, True, False]
    assert not any(i.precisa_revisao for i in manifesto.items)

    assert manifesto.list_number == "OEC2024001"
    assert manifesto.unit == "12345 - CDD UBERLANDIA"
    assert manifesto.district == "07"
    assert manifesto.city == "Uberlandia"
    assert manifesto.state == "MG"
    assert manifesto.carrier == "998877"
    assert manifesto.date == "15/03/2024"


def test_objeto_lido_duas_vezes_e_deduplicado():
    bloco = "001 AC 111 222 333 BR 1-\nRua Goiás, 100\nCEP: 38400100\n"
    itens = extrair_manifesto(bloco + bloco).items
    assert len(itens) == 1
    assert itens[0].sequence == 1


def test_deterministico(lista_ect):
    assert extrair_manifesto(lista_ect).to_dict() == extrair_manifesto(lista_ect).to_dict()


def test_metadados_estado_sem_cidade():
    metadados = extrair_metadados("Lista: OEC77\nDistrito: 3\nSP/BR")
    assert metadados["list_number"] == "OEC77"
    assert metadados["district"] == "3"
    assert metadados["state"] == "SP"
    assert metadados["city"] is None


def test_parece_lista_ect(lista_ect):
    assert parece_lista_ect(lista_ect)
    assert not parece_lista_ect("Lista de compras\narroz, feijão")
