# rotafacil/routes/api.py

from dataclasses import replace
from flask import Blueprint, current_app, request, jsonify, session
from rotafacil.routes.manifesto import manifesto_da_sessao, salvar_manifesto
from rotafacil.services.rota import calcular_metricas, gerar_url_google_maps, otimizar_rota
from rotafacil.utils.geocoder import geocodificar_itens
import logging

api_routes = Blueprint('api', __name__)
logger = logging.getLogger(__name__)


@api_routes.route('/api/geocodificar', methods=['POST'])
def geocodificar_manifesto():
    """Geocodifica todos os itens da lista na sessão."""
    try:
        manifesto = manifesto_da_sessao()
        if manifesto is None:
            return jsonify({"success": False, "msg": "Nenhuma lista processada nesta sessão."}), 404

        itens = geocodificar_itens(
            manifesto.items,
            session.get('localizacao') or None,
            cidade_padrao=current_app.config.get('CIDADE_PADRAO', 'Uberlândia'),
            uf_padrao=current_app.config.get('UF_PADRAO', 'MG'),
            intervalo=current_app.config.get('GEOCODING_DELAY', 0.0),
        )
        manifesto = replace(manifesto, items=itens)
        salvar_manifesto(manifesto)

        encontrados = sum(1 for item in itens if item.coordinates)
        return jsonify({
            "success": True,
            "geocodificados": encontrados,
            "falhas": len(itens) - encontrados,
            "manifesto": manifesto.to_dict(),
        })
    except Exception as e:
        logger.error(f"Erro ao geocodificar lista: {str(e)}", exc_info=True)
        return jsonify({"success": False, "msg": "Erro interno ao geocodificar."}), 500


@api_routes.route('/api/rota', methods=['POST'])
def gerar_rota():
    """Ordena as entregas geocodificadas a partir da posição do carteiro."""
    try:
        data = request.get_json(silent=True) or {}
        origem = data.get('origem') or {}
        try:
            origem = {"lat": float(origem['lat']), "lng": float(origem['lng'])}
        except (KeyError, TypeError, ValueError):
            return jsonify({"success": False, "msg": "Origem {lat, lng} obrigatória."}), 400

        manifesto = manifesto_da_sessao()
        if manifesto is None:
            return jsonify({"success": False, "msg": "Nenhuma lista processada nesta sessão."}), 404

        rota = otimizar_rota(manifesto.items, origem)
        if not rota:
            return jsonify({"success": False, "msg": "Nenhum item geocodificado. Geocodifique a lista primeiro."}), 400

        return jsonify({
            "success": True,
            "paradas": [item.to_dict() for item in rota],
            "sem_coordenadas": [item.sequence for item in manifesto.items if not item.coordinates],
            "metricas": calcular_metricas(rota, origem),
            "google_maps_url": gerar_url_google_maps(rota, origem),
        })
    except Exception as e:
        logger.error(f"Erro ao gerar rota: {str(e)}", exc_info=True)
        return jsonify({"success": False, "msg": "Erro interno ao gerar rota."}), 500
