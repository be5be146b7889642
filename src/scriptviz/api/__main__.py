import uvicorn

from .main import app, config

uvicorn.run(app, host="0.0.0.0", port=config.port)
