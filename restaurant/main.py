# restaurant/main.py
import uvicorn

from restaurant.api import create_app
from restaurant.data.database import Base, engine
from restaurant.utils.logging import get_logger

# import wszystkich modeli przed create_all
import restaurant.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables created")


init_db()

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
