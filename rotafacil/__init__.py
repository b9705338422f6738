from flask import Flask, jsonify
from flask_session import Session
from .routes import register_routes
from .logging_config import configure_logging
from .models import db
import os
import time
import logging

logger = logging.getLogger(__name__)

# Arquivos de sessão mais antigos que isso são apagados na inicialização
IDADE_MAXIMA_SESSAO = 24 * 60 * 60


def create_app(config_object='rotafacil.config.Config'):
    """Factory function para criar e configurar a aplicação Flask"""

    app = Flask(__name__)

    configure_logging()
    app.logger.info("🚀 Inicializando aplicação RotaFácil...")

    # Carrega configurações com verificação
    try:
        app.config.from_object(config_object)
        app.logger.info(f"⚙️ Ambiente: {app.config.get('FLASK_ENV', 'production').upper()}")
    except Exception as e:
        app.logger.error(f"❌ Erro ao carregar configurações: {str(e)}")
        raise

    # Verificação das configurações essenciais
    required_configs = {
        'SECRET_KEY': 'Chave secreta para segurança',
        'SESSION_COOKIE_NAME': 'Nome do cookie de sessão',
        'SQLALCHEMY_DATABASE_URI': 'Banco do cache de geocodificação',
    }

    missing = [key for key in required_configs if not app.config.get(key)]
    if missing:
        error_msg = "Configurações obrigatórias faltando:\n" + \
                   "\n".join(f"- {key}: {required_configs[key]}" for key in missing)
        app.logger.error(error_msg)
        raise ValueError("Configurações essenciais faltando no arquivo config.py ou variáveis de ambiente")

    # Provedores opcionais: apenas warning
    if not app.config.get('MAPBOX_TOKEN'):
        app.logger.warning("⚠️ MAPBOX_TOKEN não definido! Geocodificação via Mapbox desativada.")

    if not app.config.get('GOOGLE_CLOUD_VISION_API_KEY'):
        app.logger.warning("⚠️ GOOGLE_CLOUD_VISION_API_KEY não definida! OCR usará apenas o OCR.space.")

    # Configuração de sessão com tratamento robusto
    try:
        if app.config['SESSION_TYPE'] == 'filesystem':
            session_dir = app.config['SESSION_FILE_DIR']
            os.makedirs(session_dir, exist_ok=True)
            app.logger.info(f"📂 Sessões serão armazenadas em: {session_dir}")

            if app.config.get('CLEAN_OLD_SESSIONS', True):
                clean_old_sessions(session_dir)

        Session().init_app(app)
        app.logger.info("🔒 Sessão configurada com sucesso")
    except Exception as e:
        app.logger.error(f"❌ Falha crítica na configuração de sessão: {str(e)}")
        raise

    # Cache de geocodificação
    db.init_app(app)
    with app.app_context():
        db.create_all()
    app.logger.info("💾 Cache de geocodificação pronto")

    register_routes(app)

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"success": False, "msg": "Recurso não encontrado."}), 404

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"success": False, "msg": "Arquivo muito grande."}), 413

    return app


def clean_old_sessions(session_dir, idade_maxima=IDADE_MAXIMA_SESSAO):
    """Remove arquivos de sessão antigos do diretório do Flask-Session."""
    agora = time.time()
    removidos = 0
    for nome in os.listdir(session_dir):
        caminho = os.path.join(session_dir, nome)
        try:
            if os.path.isfile(caminho) and agora - os.path.getmtime(caminho) > idade_maxima:
                os.remove(caminho)
                removidos += 1
        except OSError as e:
            logger.warning(f"⚠️ Não foi possível remover sessão antiga {caminho}: {e}")
    if removidos:
        logger.info(f"🧹 {removidos} sessões antigas removidas")
