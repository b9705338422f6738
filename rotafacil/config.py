import os
from datetime import timedelta

class Config:
    # Configurações essenciais
    SECRET_KEY = os.getenv('SECRET_KEY', os.urandom(24).hex())
    FLASK_ENV = os.getenv('FLASK_ENV', 'production')
    DEBUG = FLASK_ENV.lower() == 'development'

    # Configurações de API externa
    OCR_SPACE_API_KEY = os.getenv('OCR_SPACE_API_KEY')
    GOOGLE_CLOUD_VISION_API_KEY = os.getenv('GOOGLE_CLOUD_VISION_API_KEY')
    MAPBOX_TOKEN = os.getenv('MAPBOX_TOKEN')
    NOMINATIM_USER_AGENT = os.getenv('NOMINATIM_USER_AGENT', 'RotaFacil/1.0 (contato@rotafacil.com)')

    # Região padrão para as consultas de geocodificação
    CIDADE_PADRAO = os.getenv('CIDADE_PADRAO', 'Uberlândia')
    UF_PADRAO = os.getenv('UF_PADRAO', 'MG')
    # Pares de letras aceitos como início de código de objeto degradado pelo OCR
    ECT_CODIGOS_TRANSPORTADORA = [
        c.strip().upper()
        for c in os.getenv('ECT_CODIGOS_TRANSPORTADORA', 'MI,OY,MJ,MT,TJ').split(',')
        if c.strip()
    ]
    # Intervalo (s) entre consultas; Nominatim aceita 1 requisição por segundo
    GEOCODING_DELAY = float(os.getenv('GEOCODING_DELAY', '1.0'))

    # Cache de geocodificação
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'sqlite:///rotafacil.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Configurações de sessão
    SESSION_TYPE = os.getenv('SESSION_TYPE', 'filesystem')
    SESSION_FILE_DIR = os.getenv('SESSION_FILE_DIR', os.path.join(os.getcwd(), 'flask_session'))
    SESSION_PERMANENT = True
    SESSION_USE_SIGNER = True
    SESSION_KEY_PREFIX = 'session:'
    PERMANENT_SESSION_LIFETIME = timedelta(days=1)

    # Configurações de cookie
    SESSION_COOKIE_NAME = os.getenv('SESSION_COOKIE_NAME', 'rotafacil_session')
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'True') == 'True'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Configuração para Redis (se necessário)
    if SESSION_TYPE == 'redis':
        import redis
        REDIS_URL = os.getenv('REDIS_URL')
        if REDIS_URL:
            SESSION_REDIS = redis.from_url(REDIS_URL)
