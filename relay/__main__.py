import uvicorn

from relay.config import settings

if __name__ == "__main__":
    uvicorn.run("relay.main:app", host="0.0.0.0", port=settings.port)
