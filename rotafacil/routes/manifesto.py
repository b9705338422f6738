# rotafacil/routes/manifesto.py

from flask import Blueprint, current_app, request, jsonify, session
from rotafacil.services.ect import extrair_manifesto, montar_consulta
from rotafacil.services.ect.modelos import Manifesto
from rotafacil.utils.helpers import sanitizar_endereco
from rotafacil.utils.ocr import extrair_texto
import json
import logging
from typing import Any, Dict, Optional

manifesto_routes = Blueprint('manifesto', __name__)
logger = logging.getLogger(__name__)


def manifesto_da_sessao() -> Optional[Manifesto]:
    dados = session.get('manifesto')
    return Manifesto.from_dict(dados) if dados else None


def salvar_manifesto(manifesto: Manifesto, localizacao: Optional[Dict[str, str]] = None) -> None:
    session['manifesto'] = manifesto.to_dict()
    if localizacao is not None:
        session['localizacao'] = localizacao
    session.modified = True


def _localizacao(valor: Any) -> Optional[Dict[str, str]]:
    """Aceita {'city', 'state'} ou nada; qualquer outra coisa é erro do cliente."""
    if valor in (None, ''):
        return None
    if isinstance(valor, str):
        valor = json.loads(valor)
    if not isinstance(valor, dict):
        raise ValueError("localizacao deve ser um objeto {city, state}")
    return {k: sanitizar_endereco(valor[k]) for k in ('city', 'state') if valor.get(k)}


def _resposta_manifesto(manifesto: Manifesto, localizacao: Optional[Dict[str, str]]) -> Dict[str, Any]:
    cidade = current_app.config.get('CIDADE_PADRAO', 'Uberlândia')
    uf = current_app.config.get('UF_PADRAO', 'MG')
    return {
        "success": True,
        "msg": manifesto.mensagem,
        "manifesto": manifesto.to_dict(),
        "consultas": [montar_consulta(item, localizacao, cidade, uf) for item in manifesto.items],
    }


def _processar_texto(texto: str, localizacao: Optional[Dict[str, str]]) -> Dict[str, Any]:
    manifesto = extrair_manifesto(texto, current_app.config.get('ECT_CODIGOS_TRANSPORTADORA'))
    salvar_manifesto(manifesto, localizacao or {})
    return _resposta_manifesto(manifesto, localizacao)


@manifesto_routes.route('/api/manifesto', methods=['POST'])
def processar_manifesto():
    """Recebe o texto do OCR de uma lista ECT e devolve os itens estruturados."""
    try:
        data = request.get_json(silent=True) or {}
        texto = data.get('texto')
        if not isinstance(texto, str) or not texto.strip():
            return jsonify({"success": False, "msg": "Texto da lista obrigatório."}), 400
        try:
            localizacao = _localizacao(data.get('localizacao'))
        except ValueError as e:
            return jsonify({"success": False, "msg": f"Localização inválida: {e}"}), 400

        return jsonify(_processar_texto(texto, localizacao))
    except Exception as e:
        logger.error(f"Erro ao processar lista ECT: {str(e)}", exc_info=True)
        return jsonify({"success": False, "msg": "Erro interno ao processar a lista."}), 500


@manifesto_routes.route('/api/manifesto/foto', methods=['POST'])
def processar_foto():
    """Recebe a foto de uma lista ECT, extrai o texto por OCR e processa."""
    try:
        photo = request.files.get('photo')
        if photo is None or not photo.filename:
            return jsonify({"success": False, "msg": "Foto não fornecida."}), 400
        try:
            localizacao = _localizacao(request.form.get('localizacao'))
        except ValueError as e:
            return jsonify({"success": False, "msg": f"Localização inválida: {e}"}), 400

        ocr = extrair_texto(photo.read(), photo.mimetype)
        if ocr.get('status') != 'OK':
            logger.warning(f"⚠️ OCR falhou para {photo.filename}: {ocr.get('status')}")
            return jsonify({"success": False, "msg": "Não foi possível ler o texto da foto.", "ocr": ocr.get('status')}), 502

        resposta = _processar_texto(ocr['texto'], localizacao)
        resposta["ocr"] = {"provedor": ocr.get('provedor'), "confianca": ocr.get('confianca')}
        return jsonify(resposta)
    except Exception as e:
        logger.error(f"Erro ao processar foto da lista ECT: {str(e)}", exc_info=True)
        return jsonify({"success": False, "msg": "Erro interno ao processar a foto."}), 500


@manifesto_routes.route('/api/manifesto', methods=['GET'])
def obter_manifesto():
    manifesto = manifesto_da_sessao()
    if manifesto is None:
        return jsonify({"success": False, "msg": "Nenhuma lista processada nesta sessão."}), 404
    return jsonify(_resposta_manifesto(manifesto, session.get('localizacao') or None))
