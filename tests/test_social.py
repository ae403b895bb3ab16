from content.models import Post
from notifications.models import Notification
from social.models import Follow, Like
from social.services import SocialGraphService


def _user(client, user_id):
    return client.get(f"/users/{user_id}").json()


def test_follow_updates_both_counters_once(client, make_user, auth_headers, db):
    alice, bob = make_user("alice"), make_user("bob")

    first = client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))
    second = client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))

    assert first.json() == {"success": True}
    assert second.json() == {"success": True}
    assert _user(client, alice.id)["followingCount"] == 1
    assert _user(client, bob.id)["followerCount"] == 1
    assert db.query(Follow).count() == 1


def test_follow_notifies_target(client, make_user, auth_headers, db):
    alice, bob = make_user("alice"), make_user("bob")

    client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))

    notification = db.query(Notification).one()
    assert notification.user_id == bob.id
    assert notification.actor_id == alice.id
    assert notification.type == "follow"
    assert notification.read is False


def test_self_follow_is_rejected(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post(f"/users/{alice.id}/follow", headers=auth_headers(alice))

    assert response.status_code == 400
    assert _user(client, alice.id)["followerCount"] == 0


def test_follow_unknown_user(client, make_user, auth_headers):
    alice = make_user("alice")
    response = client.post("/users/999/follow", headers=auth_headers(alice))
    assert response.status_code == 404


def test_follow_requires_authentication(client, make_user):
    bob = make_user("bob")
    assert client.post(f"/users/{bob.id}/follow").status_code == 401


def test_unfollow_is_idempotent(client, make_user, auth_headers):
    alice, bob = make_user("alice"), make_user("bob")
    client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))

    client.post(f"/users/{bob.id}/unfollow", headers=auth_headers(alice))
    again = client.post(f"/users/{bob.id}/unfollow", headers=auth_headers(alice))

    assert again.json() == {"success": True}
    assert _user(client, alice.id)["followingCount"] == 0
    assert _user(client, bob.id)["followerCount"] == 0


def test_counters_never_go_negative(db, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    db.add(Follow(follower_id=alice.id, following_id=bob.id))
    db.commit()

    assert SocialGraphService.unfollow_user(alice.id, bob.id, db) is True
    db.refresh(alice)
    db.refresh(bob)
    assert alice.following_count == 0
    assert bob.follower_count == 0


def test_followers_and_following_lists(client, make_user, auth_headers):
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    client.post(f"/users/{carol.id}/follow", headers=auth_headers(alice))
    client.post(f"/users/{carol.id}/follow", headers=auth_headers(bob))

    followers = client.get(f"/users/{carol.id}/followers").json()
    following = client.get(f"/users/{alice.id}/following").json()

    assert {u["username"] for u in followers} == {"alice", "bob"}
    assert [u["username"] for u in following] == ["carol"]


def test_is_following_flag_on_profile(client, make_user, auth_headers):
    alice, bob = make_user("alice"), make_user("bob")
    client.post(f"/users/{bob.id}/follow", headers=auth_headers(alice))

    as_alice = client.get(f"/users/{bob.id}", params={"currentUserId": alice.id}).json()
    anonymous = client.get(f"/users/{bob.id}").json()

    assert as_alice["isFollowing"] is True
    assert anonymous["isFollowing"] is False


def _post(db, owner):
    post = Post(user_id=owner.id, media_url="/media/posts/a.jpg", media_type="image")
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def test_like_post_is_idempotent(client, make_user, auth_headers, db):
    alice, bob = make_user("alice"), make_user("bob")
    post = _post(db, bob)

    client.post(f"/posts/{post.id}/like", headers=auth_headers(alice))
    client.post(f"/posts/{post.id}/like", headers=auth_headers(alice))

    assert client.get(f"/posts/{post.id}").json()["likeCount"] == 1
    assert db.query(Like).count() == 1
    notifications = db.query(Notification).all()
    assert [(n.type, n.user_id, n.content_id) for n in notifications] == [("like", bob.id, post.id)]


def test_unlike_post(client, make_user, auth_headers, db):
    alice, bob = make_user("alice"), make_user("bob")
    post = _post(db, bob)
    client.post(f"/posts/{post.id}/like", headers=auth_headers(alice))

    client.post(f"/posts/{post.id}/unlike", headers=auth_headers(alice))
    client.post(f"/posts/{post.id}/unlike", headers=auth_headers(alice))

    assert client.get(f"/posts/{post.id}").json()["likeCount"] == 0
    assert db.query(Like).count() == 0


def test_liking_own_post_does_not_notify(client, make_user, auth_headers, db):
    alice = make_user("alice")
    post = _post(db, alice)

    client.post(f"/posts/{post.id}/like", headers=auth_headers(alice))

    assert client.get(f"/posts/{post.id}").json()["likeCount"] == 1
    assert db.query(Notification).count() == 0


def test_like_missing_post(client, make_user, auth_headers):
    alice = make_user("alice")
    assert client.post("/posts/42/like", headers=auth_headers(alice)).status_code == 404


def test_like_video(client, make_user, auth_headers):
    alice, bob = make_user("alice"), make_user("bob")
    video = client.post("/videos", json={"videoUrl": "/media/videos/v.mp4"}, headers=auth_headers(bob)).json()

    client.post(f"/videos/{video['id']}/like", headers=auth_headers(alice))

    assert client.get(f"/videos/{video['id']}").json()["likeCount"] == 1
