# Load environment variables FIRST, before any module imports that need them
from dotenv import load_dotenv
load_dotenv()

from .logging_config import setup_logging
from .app_factory import create_app, run

setup_logging()

app = create_app()


if __name__ == "__main__":
    run()
