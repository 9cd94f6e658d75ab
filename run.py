"""Deployment runner - serves the API on $PORT."""

import os

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sourcewise.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8000)),
        log_level="info",
    )
