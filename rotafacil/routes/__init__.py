# rotafacil/routes/__init__.py

from .manifesto import manifesto_routes
from .gerar import gerar_bp
from .api import api_routes


def register_routes(app):
    """Registra os blueprints de rotas da aplicação."""
    app.register_blueprint(manifesto_routes)
    app.register_blueprint(api_routes)
    app.register_blueprint(gerar_bp)
