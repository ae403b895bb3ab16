from datetime import datetime, timedelta

from content.models import Post, Story


def _post(db, owner, caption, created_at):
    post = Post(
        user_id=owner.id, caption=caption, media_url="/media/posts/p.jpg", media_type="image", created_at=created_at
    )
    db.add(post)
    db.commit()
    return post


def test_feed_contains_own_and_followed_posts_only(client, make_user, auth_headers, db):
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))
    base = datetime.utcnow() - timedelta(hours=1)
    _post(db, alice, "mine", base)
    _post(db, bob, "followed", base + timedelta(minutes=5))
    _post(db, carol, "stranger", base + timedelta(minutes=10))

    feed = client.get("/feed/posts", params={"userId": alice.id}).json()

    assert [p["caption"] for p in feed] == ["followed", "mine"]
    assert feed[0]["user"]["username"] == "bob"
    assert feed[0]["isLiked"] is False


def test_feed_marks_liked_posts(client, make_user, auth_headers, db):
    alice, bob = make_user("alice"), make_user("bob")
    client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))
    post = _post(db, bob, "liked", datetime.utcnow())
    client.post(f"/posts/{post.id}/like", headers=auth_headers(alice))

    feed = client.get("/feed/posts", params={"userId": alice.id}).json()

    assert feed[0]["isLiked"] is True
    assert feed[0]["likeCount"] == 1


def test_unfollowed_user_drops_out_of_feed(client, make_user, auth_headers, db):
    alice, bob = make_user("alice"), make_user("bob")
    client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))
    _post(db, bob, "hello", datetime.utcnow())
    assert len(client.get("/feed/posts", params={"userId": alice.id}).json()) == 1

    client.post(f"/users/{bob.id}/unfollow", headers=auth_headers(alice))

    assert client.get("/feed/posts", params={"userId": alice.id}).json() == []


def test_feed_requires_known_user(client):
    assert client.get("/feed/posts", params={"userId": 77}).status_code == 404


def test_feed_requires_user_id(client):
    assert client.get("/feed/posts").status_code == 400


def test_video_feed(client, make_user, auth_headers):
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))
    client.post("/videos", json={"videoUrl": "/media/videos/b.mp4"}, headers=auth_headers(bob))
    client.post("/videos", json={"videoUrl": "/media/videos/c.mp4"}, headers=auth_headers(carol))

    feed = client.get("/feed/videos", params={"userId": alice.id}).json()

    assert [v["videoUrl"] for v in feed] == ["/media/videos/b.mp4"]
    assert feed[0]["isLiked"] is False


def test_story_feed_skips_expired_and_marks_viewed(client, make_user, auth_headers, db):
    alice, bob = make_user("alice"), make_user("bob")
    client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))
    now = datetime.utcnow()
    live = Story(user_id=bob.id, media_url="/media/stories/live.jpg", media_type="image",
                 created_at=now - timedelta(hours=1), expires_at=now + timedelta(hours=23))
    expired = Story(user_id=bob.id, media_url="/media/stories/old.jpg", media_type="image",
                    created_at=now - timedelta(hours=30), expires_at=now - timedelta(hours=6))
    db.add_all([live, expired])
    db.commit()
    client.post(f"/stories/{live.id}/view", headers=auth_headers(alice))

    feed = client.get("/feed/stories", params={"userId": alice.id}).json()

    assert [s["mediaUrl"] for s in feed] == ["/media/stories/live.jpg"]
    assert feed[0]["isViewed"] is True
    assert feed[0]["viewCount"] == 1
