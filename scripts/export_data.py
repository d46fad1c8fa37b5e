"""Export a user's data to a JSON Lines file.

Writes the same stream as ``GET /export``. Connection settings come from the
environment (or .env) unless given on the command line.

Usage:
    python scripts/export_data.py \\
        --user-id <user-id> \\
        --output solowork-export.jsonl
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient
from solowork.config import settings
from solowork.services.export_service import ExportService


async def export_data(
    user_id: str,
    output: Path,
    mongodb_url: Optional[str] = None,
    db_name: Optional[str] = None,
) -> int:
    """Write every record the user owns to ``output``.

    Args:
        user_id: User whose data is exported
        output: Destination file (overwritten)
        mongodb_url: MongoDB connection URL (defaults to settings)
        db_name: Database name (defaults to settings)

    Returns:
        Number of lines written
    """
    client = AsyncIOMotorClient(mongodb_url or settings.mongodb_url)
    db = client[db_name or settings.mongodb_db_name]
    service = ExportService(db)

    count = 0
    try:
        with output.open("w", encoding="utf-8") as f:
            async for line in service.export_lines(user_id):
                f.write(line)
                count += 1
    finally:
        client.close()

    return count


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Export Solowork data as JSON Lines")
    parser.add_argument(
        "--user-id",
        required=True,
        help="User ID whose data is exported",
    )
    parser.add_argument(
        "--output",
        default="solowork-export.jsonl",
        help="Output file path",
    )
    parser.add_argument(
        "--mongodb-url",
        default=None,
        help="MongoDB connection URL (defaults to MONGODB_URL)",
    )
    parser.add_argument(
        "--db-name",
        default=None,
        help="Database name (defaults to MONGODB_DB_NAME)",
    )

    args = parser.parse_args()

    output = Path(args.output)
    if not output.parent.exists():
        print(f"Error: Output directory does not exist: {output.parent}")
        sys.exit(1)

    count = await export_data(args.user_id, output, args.mongodb_url, args.db_name)
    print(f"Exported {count} records to {output}")


if __name__ == "__main__":
    asyncio.run(main())
