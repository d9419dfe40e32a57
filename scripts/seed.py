"""Populate the Postit database with demo users, posts and comments."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone
from postit.avatar import generate_avatar_tag, generate_avatar_url
from postit.database import engine, async_session, Base
from postit.models import User, Post, Comment

TOPICS = ["coffee", "hiking", "python", "jazz", "gardening", "chess",
          "cycling", "baking", "astronomy", "photography"]

async def seed(small: bool = False, reset: bool = False):
    num_users = 5 if small else 50
    num_posts = 20 if small else 2000
    max_comments_per_post = 3 if small else 8
    deleted_ratio = 0.1

    print(f"Seeding: {num_users} users, {num_posts} posts, up to {max_comments_per_post} comments each")
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        users = []
        for i in range(num_users):
            email = f"user_{i:04d}@example.com"
            username = f"user_{i:04d}"
            avatar_url = generate_avatar_url(email)
            user = User(
                email=email,
                username=username,
                avatar_url=avatar_url,
                avatar_tag=generate_avatar_tag(username, avatar_url),
            )
            session.add(user)
            users.append(user)
        await session.flush()
        print(f"  Created {len(users)} users")

        now = datetime.now(timezone.utc)
        posts = []
        for i in range(num_posts):
            post = Post(
                content=f"Post {i}: some thoughts on {random.choice(TOPICS)}.",
                user_id=random.choice(users).id,
            )
            # A share of the content starts out soft-deleted so the
            # includeDeleted/onlyDeleted filters have something to show.
            if random.random() < deleted_ratio:
                post.deleted_at = now
            session.add(post)
            posts.append(post)
        await session.flush()
        print(f"  Created {len(posts)} posts")

        total_comments = 0
        for post in posts:
            for _ in range(random.randint(0, max_comments_per_post)):
                author = random.choice(users)
                comment = Comment(
                    content=f"{author.username} says: nice take on post {post.id}!",
                    user_id=author.id,
                    post_id=post.id,
                )
                if random.random() < deleted_ratio:
                    comment.deleted_at = now
                session.add(comment)
                total_comments += 1
        await session.flush()

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Users: {num_users}")
    print(f"  Posts: {num_posts}")
    print(f"  Comments: {total_comments}")


def main():
    parser = argparse.ArgumentParser(description="Seed the Postit database")
    parser.add_argument("--small", action="store_true", help="Use a small dataset (20 posts)")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before seeding")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small, reset=args.reset))


if __name__ == "__main__":
    main()
