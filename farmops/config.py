"""
Configuración del backend FarmOps.

Carga y valida variables de entorno necesarias para hablar con la API REST
de gestión agrícola (órdenes de trabajo, actividades).
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Cargar variables de entorno desde .env.local
env_path = Path(__file__).parent.parent / '.env.local'
load_dotenv(dotenv_path=env_path)


class Config:
    """Configuración centralizada del backend."""

    # Farm REST API (persistencia de órdenes de trabajo)
    FARM_API_URL: str = os.getenv('FARM_API_URL', 'http://localhost:3000/api')
    FARM_API_TOKEN: str = os.getenv('FARM_API_TOKEN', '')

    # Timeouts y reintentos (solo lecturas se reintentan)
    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv('REQUEST_TIMEOUT_SECONDS', '10'))
    FETCH_MAX_RETRIES: int = int(os.getenv('FETCH_MAX_RETRIES', '3'))
    FETCH_RETRY_BACKOFF_SECONDS: float = float(os.getenv('FETCH_RETRY_BACKOFF_SECONDS', '0.5'))

    # Fechas límite
    DUE_SOON_THRESHOLD_DAYS: int = int(os.getenv('DUE_SOON_THRESHOLD_DAYS', '3'))
    TIMEZONE: str = os.getenv('TIMEZONE', 'America/Santiago')

    # Environment
    ENVIRONMENT: str = os.getenv('ENVIRONMENT', 'development')

    # API Configuration
    API_HOST: str = os.getenv('API_HOST', '0.0.0.0')
    API_PORT: int = int(os.getenv('API_PORT', '8000'))

    # CORS - Orígenes permitidos
    ALLOWED_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv('ALLOWED_ORIGINS', 'http://localhost:5173').split(',')
    ]

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def validate(cls) -> None:
        """
        Valida que las variables de entorno críticas estén configuradas.

        Raises:
            ValueError: Si falta la URL de la API o los tiempos no son positivos.
        """
        if not cls.FARM_API_URL:
            raise ValueError(
                "Missing required environment variable: FARM_API_URL. "
                "Please check your .env.local file."
            )

        if cls.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got {cls.REQUEST_TIMEOUT_SECONDS}"
            )

        if cls.FETCH_MAX_RETRIES < 1:
            raise ValueError(
                f"FETCH_MAX_RETRIES must be at least 1, got {cls.FETCH_MAX_RETRIES}"
            )


# Instancia global de configuración
config = Config()
