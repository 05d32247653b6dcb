"""Create Filmorate indexes and seed genres/MPA ratings in MongoDB."""

import asyncio

from filmorate_api.core.config import settings
from filmorate_api.db.mongo import create_client
from filmorate_api.services.repositories.storage import build_mongo_storage


async def main():
    print("Using DSN:", settings.mongo_dsn, "DB:", settings.mongo_db)
    client = await create_client(settings.mongo_dsn)
    storage = await build_mongo_storage(client, settings.mongo_db)
    genres = await storage.genres.find_all()
    ratings = await storage.mpa.find_all()
    print(f"Indexes ensured. genres={len(genres)} mpa={len(ratings)}")
    storage.close()


if __name__ == "__main__":
    asyncio.run(main())
