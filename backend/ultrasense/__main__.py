"""Run the server with ``python -m ultrasense``."""
import uvicorn

from .config import settings
from .main import app

uvicorn.run(app, host="0.0.0.0", port=settings.port)
