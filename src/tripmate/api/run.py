from tripmate.core.config import get_settings
import uvicorn


def main():  # pragma: no cover
    settings = get_settings()
    uvicorn.run(
        "tripmate.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        ws_ping_interval=settings.socket_ping_interval,
        ws_ping_timeout=settings.socket_ping_timeout,
        reload=False,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
