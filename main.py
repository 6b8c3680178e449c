import asyncio

from src.main import main, setup_logging

if __name__ == "__main__":
    setup_logging()
    asyncio.run(main())
