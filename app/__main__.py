import uvicorn

from app.settings import get_settings


def main() -> None:
    settings = get_settings()
    # logging is configured by create_app(); keep uvicorn's own config out of it
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
