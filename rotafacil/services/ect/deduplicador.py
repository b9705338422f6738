# rotafacil/services/ect/deduplicador.py
"""
Remove itens duplicados e mescla extrações parciais do mesmo objeto.

O OCR frequentemente lê duas vezes a mesma linha de código (por exemplo em
fotos sobrepostas de uma lista longa). A chave natural é o código do objeto;
na falta dele usa-se o par (CEP, endereço normalizado).
"""
import logging
from dataclasses import replace
from typing import Dict, Hashable, List, Sequence

from rotafacil.utils.helpers import UNKNOWN, normalizar
from .modelos import ItemEntrega

logger = logging.getLogger(__name__)

# Campos que a mescla pode completar a partir do registro perdedor
CAMPOS_MESCLAVEIS = (
    'object_code', 'raw_address_line', 'normalized_address', 'cep',
    'destination_hint', 'printed_sequence', 'source_line',
)


def chave_deduplicacao(item: ItemEntrega, posicao: int) -> Hashable:
    if item.object_code:
        return ('codigo', ''.join(item.object_code.split()).upper())
    if item.normalized_address:
        return ('endereco', item.cep, normalizar(item.normalized_address))
    # Sem código nem endereço: nunca mescla
    return ('posicao', posicao)


def _vazio(valor) -> bool:
    return valor is None or valor == UNKNOWN


def mesclar(vencedor: ItemEntrega, perdedor: ItemEntrega) -> ItemEntrega:
    """Completa os campos vazios do vencedor com os do perdedor, sem sobrescrever."""
    mudancas = {
        nome: getattr(perdedor, nome)
        for nome in CAMPOS_MESCLAVEIS
        if _vazio(getattr(vencedor, nome)) and not _vazio(getattr(perdedor, nome))
    }
    if perdedor.ar_required and not vencedor.ar_required:
        mudancas['ar_required'] = True
    # Uma faixa resolvida em qualquer das leituras vale para o item mesclado
    if 'normalized_address' in mudancas:
        mudancas['range_unresolved'] = perdedor.range_unresolved
    return replace(vencedor, **mudancas) if mudancas else vencedor


def deduplicar(itens: Sequence[ItemEntrega]) -> List[ItemEntrega]:
    """
    Colapsa itens com a mesma chave. Vence o registro com mais campos preenchidos
    (empate: o primeiro visto). A ordem de primeira aparição é mantida e a
    sequência é renumerada de 1 a N.
    """
    por_chave: Dict[Hashable, ItemEntrega] = {}
    for posicao, item in enumerate(itens):
        chave = chave_deduplicacao(item, posicao)
        existente = por_chave.get(chave)
        if existente is None:
            por_chave[chave] = item
            continue
        if item.campos_preenchidos > existente.campos_preenchidos:
            por_chave[chave] = mesclar(item, existente)
        else:
            por_chave[chave] = mesclar(existente, item)
        logger.info(f"🔁 Item duplicado mesclado: {chave[1]}")

    # dict preserva a ordem de inserção da chave: primeira aparição
    resultado = [replace(item, sequence=i) for i, item in enumerate(por_chave.values(), start=1)]
    if len(resultado) != len(itens):
        logger.info(f"✅ Deduplicação: {len(itens)} -> {len(resultado)} itens")
    return resultado
