#!/usr/bin/env python3
"""
Seed data script for development and testing
"""
import asyncio
import sys
from pathlib import Path
import random

# Add the project root to the Python path
current_dir = Path(__file__).parent
root_dir = current_dir.parent
sys.path.insert(0, str(root_dir))

MESSAGES = [
    "Finally finished my thesis. Thank you to whoever left coffee in the library!",
    "Does anyone else think the new bus schedule is worse?",
    "Shout-out to the person who returned my wallet yesterday.",
    "Exam week survival tip: sleep is not optional.",
    "The sunset from the rooftop today was unreal.",
    "Can we please get more plants in the study hall?",
    "To the stranger who smiled at me this morning: it helped.",
    "Unpopular opinion: pineapple belongs on pizza.",
]

REPLIES = [
    "Totally agree!",
    "Same here.",
    "This made my day.",
    "Hard disagree, but respect.",
    "Who else saw this?",
]

async def seed_comments(count: int = 8, max_replies: int = 3) -> list:
    """Seed top-level comments, each with a few replies and likes"""
    from freedom_wall.db.session import get_db
    from freedom_wall.schemas.comment_schema import CommentCreate
    from freedom_wall.services.comment_service import CommentService

    print(f"📝 Seeding {count} comments...")

    created = []
    async for db in get_db():
        comment_service = CommentService(db)

        for i in range(count):
            try:
                comment = await comment_service.create_comment(
                    CommentCreate(message=MESSAGES[i % len(MESSAGES)])
                )
                created.append(comment)

                for _ in range(random.randint(0, max_replies)):
                    await comment_service.create_comment(
                        CommentCreate(message=random.choice(REPLIES), parent_id=comment.id)
                    )

                for _ in range(random.randint(0, 25)):
                    await comment_service.increment_likes(comment.id)

            except Exception as e:
                print(f"⚠️  Error creating comment {i}: {e}")

    print(f"✅ Created {len(created)} comments")
    return created

async def clear_all_data(confirm: bool = False) -> None:
    """Delete every comment"""
    if not confirm:
        print("⚠️  WARNING: This will delete ALL comments!")
        print("   Use --confirm flag to proceed")
        return

    from sqlalchemy import delete
    from freedom_wall.db.session import get_db
    from freedom_wall.models import Comment

    async for db in get_db():
        await db.execute(delete(Comment))

    print("✅ All data cleared")

def main() -> None:
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Database Seeding")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    comments_parser = subparsers.add_parser("comments", help="Seed comments with replies")
    comments_parser.add_argument("--count", type=int, default=8, help="Number of top-level comments")

    clear_parser = subparsers.add_parser("clear", help="Clear all data")
    clear_parser.add_argument("--confirm", action="store_true", help="Confirm clear")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "comments":
            asyncio.run(seed_comments(args.count))

        elif args.command == "clear":
            asyncio.run(clear_all_data(args.confirm))

    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user")
        sys.exit(1)

if __name__ == "__main__":
    main()
