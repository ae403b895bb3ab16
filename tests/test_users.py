def test_search_matches_username_or_full_name(client, make_user):
    make_user("milan", full_name="Milan Petrovic")
    make_user("ana", full_name="Ana Jovanovic")

    by_name = client.get("/users/search", params={"q": "PETRO"}).json()
    by_username = client.get("/users/search", params={"q": "an"}).json()

    assert [u["username"] for u in by_name] == ["milan"]
    assert [u["username"] for u in by_username] == ["milan", "ana"]


def test_search_treats_wildcards_literally(client, make_user):
    make_user("milan")
    make_user("snake_case")
    make_user("percent", full_name="100% Real")

    assert [u["username"] for u in client.get("/users/search", params={"q": "_"}).json()] == ["snake_case"]
    assert [u["username"] for u in client.get("/users/search", params={"q": "%"}).json()] == ["percent"]
    assert client.get("/users/search", params={"q": "\\"}).json() == []


def test_search_requires_a_query(client):
    assert client.get("/users/search", params={"q": "  "}).status_code == 400


def test_profile_update_is_owner_only(client, make_user, auth_headers):
    alice, bob = make_user("alice"), make_user("bob")

    denied = client.put(f"/users/{alice.id}/profile", json={"bio": "hacked"}, headers=auth_headers(bob))
    allowed = client.put(
        f"/users/{alice.id}/profile", json={"bio": "Hello", "interests": ["chess"]}, headers=auth_headers(alice)
    )

    assert denied.status_code == 403
    assert allowed.json()["bio"] == "Hello"
    assert allowed.json()["interests"] == ["chess"]
