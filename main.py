import os

import uvicorn

from quizflow.app import app


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.environ.get("QUIZFLOW_HOST", "127.0.0.1"),
        port=int(os.environ.get("QUIZFLOW_PORT", "8000")),
    )
