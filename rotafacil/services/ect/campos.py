# rotafacil/services/ect/campos.py
"""
Extração dos campos de um item ECT.

Cada campo é preenchido no máximo uma vez por item: a primeira linha que
casar vence e leituras posteriores (muitas vezes o mesmo campo repetido e
mais degradado pelo OCR) são ignoradas.
"""
import logging
from dataclasses import replace
from typing import Optional

from rotafacil.utils.helpers import UNKNOWN
from . import padroes
from .modelos import ItemEntrega

logger = logging.getLogger(__name__)


def remover_rotulo_endereco(linha: str) -> str:
    return padroes.ROTULO_ENDERECO.sub('', linha).strip()


def candidata_endereco(linha: str) -> Optional[str]:
    """
    Devolve o endereço contido na linha, ou None se ela não parecer um endereço.
    Uma linha é candidata quando tem palavra de logradouro ou vírgula.
    """
    texto = remover_rotulo_endereco(linha)
    if not texto or padroes.ROTULOS_NAO_ENDERECO.match(texto):
        return None
    if padroes.PALAVRAS_LOGRADOURO.search(texto) or ',' in texto:
        return texto
    return None


def extrair_cep(linha: str) -> Optional[str]:
    match = padroes.CEP.search(linha)
    return match.group(1) + match.group(2) if match else None


def extrair_sequencia_impressa(linha: str) -> Optional[int]:
    match = padroes.SEQUENCIA_IMPRESSA.match(linha)
    return int(match.group(1)) if match else None


def ar_obrigatorio(linha: str) -> bool:
    return bool(padroes.AR_OBRIGATORIO.search(linha))


def campos_da_fronteira(item: ItemEntrega, linha: str) -> ItemEntrega:
    """Campos lidos da própria linha do código de objeto: sequência impressa e AR."""
    mudancas = {}
    if item.printed_sequence is None:
        sequencia = extrair_sequencia_impressa(linha)
        if sequencia is not None:
            mudancas["printed_sequence"] = sequencia
    if not item.ar_required and ar_obrigatorio(linha):
        mudancas["ar_required"] = True
    return replace(item, **mudancas) if mudancas else item


def extrair_campos(item: ItemEntrega, linha: str) -> ItemEntrega:
    """Aplica uma linha do corpo do item, sem sobrescrever campos já preenchidos."""
    mudancas = {}

    endereco = candidata_endereco(linha)
    if endereco and item.raw_address_line == UNKNOWN:
        mudancas["raw_address_line"] = endereco
        logger.debug(f"🏠 Endereço encontrado: {endereco}")

    if item.cep == UNKNOWN:
        cep = extrair_cep(linha)
        if cep:
            mudancas["cep"] = cep
            logger.debug(f"📮 CEP encontrado: {cep}")

    if (
        endereco is None
        and item.destination_hint is None
        and '-' in linha
        and '/' in linha
    ):
        mudancas["destination_hint"] = linha.strip()

    return replace(item, **mudancas) if mudancas else item
