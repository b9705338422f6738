# rotafacil/services/ect/consulta.py
"""Montagem da string de consulta enviada ao geocodificador."""
from typing import Mapping, Optional

from rotafacil.utils.helpers import normalizar_uf, titulo_cidade, validar_cep
from .modelos import ItemEntrega

CIDADE_PADRAO = "Uberlândia"
UF_PADRAO = "MG"


def montar_consulta(
    item: ItemEntrega,
    localizacao: Optional[Mapping[str, str]] = None,
    cidade_padrao: str = CIDADE_PADRAO,
    uf_padrao: str = UF_PADRAO,
) -> str:
    """
    Retorna "<endereço>, <cep>, <Cidade>, <UF>, Brasil".

    Cidade e UF vêm da localização informada; se ela faltar ou o estado não
    for reconhecido, valem os padrões configurados. Partes desconhecidas
    (CEP 'unknown', endereço ausente) são omitidas.
    """
    cidade, uf = cidade_padrao, uf_padrao
    if localizacao:
        uf_informada = normalizar_uf(localizacao.get('state'))
        cidade_informada = titulo_cidade(localizacao.get('city'))
        if uf_informada and cidade_informada:
            cidade, uf = cidade_informada, uf_informada

    endereco = item.normalized_address
    if not endereco and item.tem_endereco:
        endereco = item.raw_address_line

    partes = [
        endereco,
        item.cep if validar_cep(item.cep) else None,
        cidade,
        uf,
        "Brasil",
    ]
    return ', '.join(p for p in partes if p)
