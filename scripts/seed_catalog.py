"""Seed the catalog with genres and books, generated or loaded from a CSV file."""
import argparse
import ast
import asyncio
import random
import sys
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

import pandas as pd

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.db.connection import close_pool, init_db
from app.db.postgres_repository import PostgresBookRepository
from app.models.book_model import Book, to_price
from app.services.errors import AlreadyExistsError, NotFoundError, StorageError
from app.services.repository import BookRepository
from app.utils.logger import get_logger

logger = get_logger("seed_catalog")

GENRE_POOL = [
    "Adventure", "Biography", "Comic", "Crime", "Drama", "Erotic", "Fantasy",
    "Fiction", "History", "Horror", "Humor", "Mystery", "Philosophy", "Poetry",
    "Romance", "Science", "Thriller", "Western",
]
TITLE_WORDS = [
    "Shadow", "River", "Crown", "Garden", "Silence", "Winter", "Ashes", "Orchard",
    "Lantern", "Harbor", "Glass", "Empire", "Feather", "Storm", "Mirror", "Road",
]
AUTHOR_NAMES = [
    "Ada Hale", "Bruno Sato", "Clara Voss", "Dmitri Lund", "Elena Marsh",
    "Felix Okafor", "Greta Ibarra", "Hugo Brandt", "Iris Calloway", "Jonah Reyes",
]
COVER_PLACEHOLDER = "https://placehold.co/600x400"
MIN_PRICE, MAX_PRICE = 0.99, 69.99


def parse_list_field(value) -> List[str]:
    """Parse a string that looks like a Python list into an actual list."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return []

    if isinstance(value, str) and value.startswith("["):
        try:
            result = ast.literal_eval(value)
        except (ValueError, SyntaxError):
            value = value.strip("[]").replace("'", "").replace('"', "")
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(result, list):
            return [str(item).strip() for item in result if item]
        return []

    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]

    return []


def random_price(rng: random.Random) -> Decimal:
    return to_price(round(rng.uniform(MIN_PRICE, MAX_PRICE), 2))


def random_genre_subset(genres: List[str], rng: random.Random) -> List[str]:
    return rng.sample(genres, rng.randint(0, len(genres) - 1)) if genres else []


async def seed_genres(repository: BookRepository, names: List[str]) -> int:
    """Create genres, tolerating ones that already exist."""
    created = 0
    for name in names:
        try:
            await repository.create_genre(name)
            created += 1
        except AlreadyExistsError:
            logger.info(f"Genre '{name}' already exists")
    return created


async def seed_generated(
    repository: BookRepository,
    genre_count: int,
    book_count: int,
    rng: random.Random,
) -> int:
    genres = rng.sample(GENRE_POOL, min(genre_count, len(GENRE_POOL)))
    created = await seed_genres(repository, genres)
    logger.info(f"Seeded {created} genres ({len(genres)} requested)")

    inserted = 0
    for _ in range(book_count):
        book = Book(
            title=f"The {rng.choice(TITLE_WORDS)} of {rng.choice(TITLE_WORDS)}",
            author=rng.choice(AUTHOR_NAMES),
            description="Generated sample book.",
            cover_image=COVER_PLACEHOLDER,
            price=random_price(rng),
            genres=random_genre_subset(genres, rng),
        )
        await repository.create_book(book)
        inserted += 1
    return inserted


async def seed_from_csv(
    repository: BookRepository,
    csv_path: Path,
    limit: Optional[int],
    rng: random.Random,
) -> int:
    df = pd.read_csv(csv_path, nrows=limit)
    logger.info(f"Loaded {len(df)} rows from {csv_path}")

    inserted = 0
    errors = 0
    known_genres = set(await repository.get_genres())

    for idx, row in df.iterrows():
        raw_title = row.get("Title")
        title = "" if pd.isna(raw_title) else str(raw_title).strip()
        authors = parse_list_field(row.get("authors"))
        if not title or not authors:
            continue

        genres = parse_list_field(row.get("categories"))
        new_genres = [genre for genre in genres if genre not in known_genres]
        await seed_genres(repository, new_genres)
        known_genres.update(new_genres)

        description = row.get("description")
        image = row.get("image")
        book = Book(
            title=title,
            author=authors[0],
            description="" if pd.isna(description) else str(description),
            cover_image=COVER_PLACEHOLDER if pd.isna(image) else str(image),
            price=random_price(rng),
            genres=genres,
        )
        try:
            await repository.create_book(book)
            inserted += 1
        except (NotFoundError, StorageError) as e:
            logger.warning(f"Skipped row {idx} ('{title}'): {e}")
            errors += 1

    if errors:
        logger.warning(f"{errors} rows could not be inserted")
    return inserted


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the bookstore catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 10 random genres and 1,000 generated books
  python scripts/seed_catalog.py

  # Load the first 500 books of a CSV export
  python scripts/seed_catalog.py --csv books_data.csv --limit 500
        """,
    )
    parser.add_argument("--genres", type=int, default=10, help="Number of genres to generate (default: 10)")
    parser.add_argument("--books", type=int, default=1000, help="Number of books to generate (default: 1000)")
    parser.add_argument("--csv", type=str, default=None, help="Load books from this CSV instead of generating")
    parser.add_argument("--limit", type=int, default=None, help="Maximum CSV rows to load (default: all)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    pool = await init_db()
    repository = PostgresBookRepository(pool, timeout=settings.db_timeout_seconds)

    try:
        if args.csv:
            csv_path = Path(args.csv)
            if not csv_path.exists():
                logger.error(f"CSV file not found: {csv_path}")
                return
            inserted = await seed_from_csv(repository, csv_path, args.limit, rng)
        else:
            inserted = await seed_generated(repository, args.genres, args.books, rng)
        logger.info(f"Seeding complete, {inserted} books inserted")
    finally:
        await close_pool()


if __name__ == "__main__":
    asyncio.run(main())
