# rotafacil/utils/geocoder.py
"""
Módulo "Dispatcher" de Geocodificação.
Decide qual serviço de geocodificação usar, implementando lógica de cascata,
com um cache local (SQLite) consultado antes de qualquer provedor.
"""

import hashlib
import logging
import time
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from flask import has_app_context
from sqlalchemy.exc import SQLAlchemyError

from rotafacil.models import db, CacheGeocodificacao
from rotafacil.services.ect.consulta import CIDADE_PADRAO, UF_PADRAO, montar_consulta
from rotafacil.services.ect.modelos import ItemEntrega
from .helpers import normalizar
from . import nominatim  # Gratuito - preferencial
from . import photon     # Fallback 1
from . import mapbox     # Fallback 2

logger = logging.getLogger(__name__)

# Ordem de prioridade dos provedores
GEOCODER_PRIORITY = [
    nominatim.geocodificar_nominatim,
    photon.geocodificar_photon,
    mapbox.geocodificar_mapbox,
]


def _hash_consulta(consulta: str) -> str:
    return hashlib.md5(normalizar(consulta).encode('utf-8')).hexdigest()


def buscar_no_cache(consulta: str) -> Optional[dict]:
    if not has_app_context():
        return None
    entrada = CacheGeocodificacao.query.filter_by(hash_consulta=_hash_consulta(consulta)).first()
    if entrada is None:
        return None
    entrada.hits += 1
    entrada.usado_em = datetime.utcnow()
    resultado = entrada.to_resultado()
    hits = entrada.hits
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning(f"⚠️ Contador do cache não atualizado ({consulta}): {e}")
    logger.info(f"💾 Cache de geocodificação: {consulta} ({hits} hits)")
    return resultado


def salvar_no_cache(consulta: str, resultado: dict) -> None:
    """Grava o resultado no cache. Falha de banco não invalida a geocodificação."""
    if not has_app_context():
        return
    coordenadas = resultado["coordenadas"]
    try:
        db.session.add(CacheGeocodificacao(
            hash_consulta=_hash_consulta(consulta),
            consulta_original=consulta[:500],
            consulta_normalizada=normalizar(consulta)[:500],
            lat=coordenadas["lat"],
            lng=coordenadas["lng"],
            endereco_formatado=(resultado.get("endereco_formatado") or "")[:500],
            provedor=resultado.get("provedor"),
            confianca=resultado.get("confianca"),
        ))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning(f"⚠️ Não foi possível gravar no cache de geocodificação ({consulta}): {e}")


def geocodificar(consulta: str) -> dict:
    """
    Tenta geocodificar a consulta usando provedores em cascata (Nominatim, Photon, Mapbox).
    Retorna o primeiro resultado com status "OK".
    """
    cache = buscar_no_cache(consulta)
    if cache:
        return cache

    logger.info(f"Iniciando geocodificação em cascata para: '{consulta}'")
    erros = []
    for geocode_func in GEOCODER_PRIORITY:
        provider_name = geocode_func.__module__.split('.')[-1]
        logger.info(f"Tentando com o provedor: {provider_name}...")
        try:
            resultado = geocode_func(consulta) or {}
        except Exception as e:
            logger.error(f"Erro inesperado ao usar o provedor {provider_name}: {e}", exc_info=True)
            erros.append({provider_name: str(e)})
            continue

        if str(resultado.get("status", "")).startswith("OK"):
            logger.info(f"Endereço geocodificado com sucesso via {provider_name}.")
            salvar_no_cache(consulta, resultado)
            return resultado
        logger.warning(f"Provedor {provider_name} falhou ou não encontrou o endereço (Status: {resultado.get('status')}).")
        erros.append({provider_name: resultado.get('status')})

    logger.error(f"Todos os provedores falharam para o endereço: '{consulta}'. Retornando falha.")
    return {
        "status": "ALL_PROVIDERS_FAILED",
        "coordenadas": None,
        "erros": erros
    }


def geocodificar_itens(
    itens: Sequence[ItemEntrega],
    localizacao: Optional[Dict[str, str]] = None,
    cidade_padrao: str = CIDADE_PADRAO,
    uf_padrao: str = UF_PADRAO,
    intervalo: float = 0.0,
) -> List[ItemEntrega]:
    """
    Anexa coordenadas ou erro de geocodificação a cada item.
    Nenhum item é removido; a ordem é mantida.
    """
    resultado = []
    for posicao, item in enumerate(itens):
        if not item.tem_endereco and not item.tem_cep:
            logger.warning(f"⚠️ Item {item.sequence} sem endereço nem CEP; geocodificação ignorada.")
            resultado.append(replace(item, coordinates=None, geocoding_error="SEM_ENDERECO"))
            continue

        if posicao and intervalo > 0:
            # Nominatim limita a 1 requisição por segundo
            time.sleep(intervalo)

        consulta = montar_consulta(item, localizacao, cidade_padrao, uf_padrao)
        geo = geocodificar(consulta)
        if str(geo.get("status", "")).startswith("OK"):
            resultado.append(replace(item, coordinates=dict(geo["coordenadas"]), geocoding_error=None))
        else:
            resultado.append(replace(item, coordinates=None, geocoding_error=geo.get("status", "ERRO")))

    encontrados = sum(1 for item in resultado if item.coordinates)
    logger.info(f"📍 Geocodificação concluída: {encontrados}/{len(resultado)} itens com coordenadas")
    return resultado
