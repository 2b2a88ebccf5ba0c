import os

from dotenv import load_dotenv


# PUBLIC_INTERFACE
def main() -> None:
    """
    Entrypoint for running the HR Portal API via Uvicorn.

    - Loads environment variables from a local `.env` if present.
    - Builds the app through the `create_app` factory so settings are read
      after dotenv; a missing JWT_SECRET_KEY or DATABASE_URL stops the process.
    - Binds to HOST/PORT (defaults: 0.0.0.0:3001).

    Uvicorn turns SIGINT/SIGTERM into a lifespan shutdown, which disposes the
    database engine.
    """
    load_dotenv(override=False)

    import uvicorn  # imported after dotenv so env is available

    host = os.getenv("UVICORN_HOST", os.getenv("HOST", "0.0.0.0"))
    port = int(os.getenv("PORT", "3001"))
    workers = int(os.getenv("UVICORN_WORKERS", "1"))

    uvicorn.run("hrportal.api.main:create_app", factory=True, host=host, port=port, workers=workers, reload=False)


if __name__ == "__main__":
    main()
