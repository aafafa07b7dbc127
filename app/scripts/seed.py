# app/scripts/seed.py
"""
Seed a demo user pair, project and a comment thread. Safe to re-run: lists and
counters are only written on first insert, then rebuilt by recount_project.
"""
from app.auth.passwords import hash_password
from app.config import settings
from app.db.mongo import db, ensure_indexes
from app.services.counters import recount_project
from app.utils.ids import now_iso


def main() -> None:
    now = now_iso()

    ensure_indexes()

    # Users: don't overwrite created_at on reseed
    for uid, username in (("u_demo", "demo"), ("u_guest", "guest")):
        db.users.update_one(
            {"_id": uid},
            {
                "$set": {
                    "username": username,
                    "email": f"{username}@example.com",
                    "password": hash_password("password123"),
                    "avatar": settings.default_avatar,
                    "bio": f"{username} account",
                    "githubProfile": "",
                    "portfolio": "",
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

    # Project
    db.projects.update_one(
        {"_id": "p_demo"},
        {
            "$set": {
                "title": "Demo Project",
                "description": "A sample project to explore the API.",
                "image": "https://example.com/demo.png",
                "githubUrl": "https://github.com/example/demo",
                "liveUrl": None,
                "tags": ["web", "api"],
                "author": "u_demo",
                "updated_at": now,
            },
            "$setOnInsert": {
                "likes": ["u_guest"],
                "likesCount": 1,
                "commentsCount": 0,
                "created_at": now,
            },
        },
        upsert=True,
    )

    # Comment + reply; replies/likes written by the API after the first seed are kept
    db.comments.update_one(
        {"_id": "c_demo"},
        {
            "$set": {
                "content": "Nice work!",
                "author": "u_guest",
                "project": "p_demo",
                "parentComment": None,
                "updated_at": now,
            },
            "$setOnInsert": {"replies": [], "likes": [], "likesCount": 0, "created_at": now},
        },
        upsert=True,
    )
    db.comments.update_one(
        {"_id": "c_demo_reply"},
        {
            "$set": {
                "content": "Thanks!",
                "author": "u_demo",
                "project": "p_demo",
                "parentComment": "c_demo",
                "updated_at": now,
            },
            "$setOnInsert": {"replies": [], "likes": [], "likesCount": 0, "created_at": now},
        },
        upsert=True,
    )
    db.comments.update_one({"_id": "c_demo"}, {"$addToSet": {"replies": "c_demo_reply"}})

    recount_project("p_demo")

    print("Seeded: users u_demo/u_guest (password123), project p_demo, comments c_demo, c_demo_reply")


if __name__ == "__main__":
    main()
