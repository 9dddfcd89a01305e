from fastapi.testclient import TestClient


def test_search_matches_title_or_description_case_insensitively(
    client: TestClient, make_user, make_video
):
    headers, _ = make_user("searcher")
    make_video(headers, title="All about FOO", description="")
    make_video(headers, title="Unrelated", description="a food blog")
    make_video(headers, title="Nothing here", description="bar baz")

    r = client.get("/api/videos/?query=foo", headers=headers)
    assert r.status_code == 200
    page = r.json()["data"]
    titles = sorted(v["title"] for v in page["items"])
    assert titles == ["All about FOO", "Unrelated"]
    assert page["total"] == 2


def test_search_treats_wildcards_literally(client: TestClient, make_user, make_video):
    headers, _ = make_user("literal")
    make_video(headers, title="100% real")
    make_video(headers, title="1000 reasons")

    r = client.get("/api/videos/", params={"query": "0%"}, headers=headers)
    assert [v["title"] for v in r.json()["data"]["items"]] == ["100% real"]


def test_list_videos_pagination_metadata(client: TestClient, make_user, make_video):
    headers, _ = make_user("pager")
    for i in range(5):
        make_video(headers, title=f"Clip {i}")

    r = client.get("/api/videos/?page=1&limit=2&sort_by=title&sort_type=asc", headers=headers)
    assert r.status_code == 200
    page = r.json()["data"]
    assert [v["title"] for v in page["items"]] == ["Clip 0", "Clip 1"]
    assert page["total"] == 5
    assert page["total_pages"] == 3
    assert page["has_next_page"] is True
    assert page["has_prev_page"] is False

    r = client.get("/api/videos/?page=3&limit=2&sort_by=title&sort_type=asc", headers=headers)
    page = r.json()["data"]
    assert [v["title"] for v in page["items"]] == ["Clip 4"]
    assert page["has_next_page"] is False
    assert page["has_prev_page"] is True


def test_sort_descending_and_owner_filter(client: TestClient, make_user, make_video):
    h1, u1 = make_user("ownera")
    h2, _ = make_user("ownerb")
    make_video(h1, title="A1", duration=10)
    make_video(h1, title="A2", duration=30)
    make_video(h2, title="B1", duration=20)

    r = client.get(f"/api/videos/?user_id={u1}&sort_by=duration&sort_type=desc", headers=h2)
    assert [v["title"] for v in r.json()["data"]["items"]] == ["A2", "A1"]


def test_unpublished_videos_hidden_from_other_users(client: TestClient, make_user, make_video):
    owner_headers, _ = make_user("drafter")
    other_headers, _ = make_user("browser")
    draft = make_video(owner_headers, title="Draft")
    make_video(owner_headers, title="Public")
    client.patch(f"/api/videos/toggle/publish/{draft['id']}", headers=owner_headers)

    r = client.get("/api/videos/", headers=other_headers)
    assert [v["title"] for v in r.json()["data"]["items"]] == ["Public"]
    assert client.get(f"/api/videos/{draft['id']}", headers=other_headers).status_code == 404

    r = client.get("/api/videos/", headers=owner_headers)
    assert r.json()["data"]["total"] == 2


def test_invalid_sort_parameters(client: TestClient, make_user):
    headers, _ = make_user("sorter")
    assert client.get("/api/videos/?sort_by=password", headers=headers).status_code == 400
    assert client.get("/api/videos/?sort_type=sideways", headers=headers).status_code == 400
