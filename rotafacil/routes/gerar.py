# rotafacil/routes/gerar.py
from flask import Blueprint, redirect, url_for, session, send_file, jsonify
import io
import uuid
from datetime import datetime
import logging

from rotafacil.routes.manifesto import manifesto_da_sessao
from rotafacil.services.exporters import exportar_csv

logger = logging.getLogger(__name__)
gerar_bp = Blueprint('gerar', __name__)

@gerar_bp.route('/generate', methods=['POST'])
def generate():
    """
    Gera um CSV a partir da lista ECT já processada na sessão.
    Não reprocessa nem geocodifica, apenas exporta.
    """
    try:
        manifesto = manifesto_da_sessao()

        if manifesto is None or not manifesto.items:
            return jsonify({"success": False, "msg": "Não há itens na sessão para gerar o arquivo."}), 404

        csv_content = exportar_csv(manifesto)

        # Usa um ID único para o CSV na sessão, permitindo múltiplos downloads simultâneos
        csv_id = str(uuid.uuid4())
        nome = manifesto.list_number or 'lista'
        session[f'csv_{csv_id}'] = {
            'content': csv_content,
            'timestamp': datetime.now().isoformat(),
            'filename': f'ect_{nome}_{datetime.now().strftime("%Y%m%d_%H%M")}.csv'
        }
        session.modified = True

        return redirect(url_for('gerar.download', csv_id=csv_id))

    except Exception as e:
        logger.error(f"Erro ao gerar CSV: {str(e)}", exc_info=True)
        return jsonify({"success": False, "msg": "Erro interno ao gerar o arquivo CSV."}), 500

@gerar_bp.route('/download/<csv_id>')
def download(csv_id):
    """
    Fornece o download do CSV gerado e armazenado na sessão.
    """
    csv_data_key = f'csv_{csv_id}'
    csv_data = session.get(csv_data_key)

    if not csv_data or not csv_data.get('content'):
        return jsonify({"success": False, "msg": "Arquivo CSV não encontrado ou expirado. Gere novamente."}), 404

    # Remove o CSV da sessão após o uso para não acumular dados
    session.pop(csv_data_key, None)
    session.modified = True

    return send_file(
        io.BytesIO(csv_data['content'].encode('utf-8-sig')),  # utf-8-sig para Excel
        mimetype='text/csv',
        as_attachment=True,
        download_name=csv_data.get('filename', 'lista_ect.csv')
    )
