"""
Expose the FastAPI application instance.

Importing this module will create a FastAPI application and register
all routes.  The service can be started with Uvicorn directly or with the
``-m`` invocation, which listens on ``PORT``:

```sh
python -m scriptviz.api
```
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
