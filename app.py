#!/usr/bin/env python3
from rotafacil import create_app
from rotafacil.logging_config import configure_logging
import os
import logging
from dotenv import load_dotenv

# Executado tanto pelo Gunicorn quanto localmente.
configure_logging()

# .env antes de importar a configuração
load_dotenv()

# Instância encontrada pelo Gunicorn (app:app)
app = create_app()


if __name__ == '__main__':
    # Apenas com `python app.py`; as configurações obrigatórias já foram validadas em create_app
    host = os.getenv('HOST', '127.0.0.1')
    port = int(os.getenv('PORT', 5000))
    logging.info(f"🚀 Iniciando servidor de DESENVOLVIMENTO em http://{host}:{port}")
    app.run(host=host, port=port, debug=app.debug)
