import logging

def setup_logging(env: str = "local"):
    level = logging.DEBUG if env != "prod" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    if env == "prod":
        # httpx logs every embedding/generation request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)
