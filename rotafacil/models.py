from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

class CacheGeocodificacao(db.Model):
    __tablename__ = 'cache_geocodificacao'

    id = db.Column(db.Integer, primary_key=True)
    hash_consulta = db.Column(db.String(32), nullable=False, unique=True, index=True)  # md5 da consulta normalizada
    consulta_original = db.Column(db.String(500), nullable=False)
    consulta_normalizada = db.Column(db.String(500), nullable=False)
    lat = db.Column(db.Float, nullable=False)
    lng = db.Column(db.Float, nullable=False)
    endereco_formatado = db.Column(db.String(500), nullable=True)
    provedor = db.Column(db.String(32), nullable=True)
    confianca = db.Column(db.Float, nullable=True)
    hits = db.Column(db.Integer, nullable=False, default=1)
    criado_em = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    usado_em = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_resultado(self) -> dict:
        """Converte a entrada no mesmo formato devolvido pelos provedores."""
        return {
            "status": "OK",
            "coordenadas": {"lat": float(self.lat), "lng": float(self.lng)},
            "endereco_formatado": self.endereco_formatado or "",
            "confianca": self.confianca,
            "provedor": self.provedor,
            "cache": True,
        }

    def __repr__(self):
        return f"<CacheGeocodificacao {self.id} - {self.consulta_normalizada}>"
