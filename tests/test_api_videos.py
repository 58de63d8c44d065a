import uuid

CDN = "cdn.test"


async def test_price_decides_premium(create_video):
    free = await create_video(price=0)
    premium = await create_video(price=50)

    assert free["is_premium"] is False
    assert premium["is_premium"] is True
    assert free["views"] == 0
    assert free["upload_date"]


async def test_create_rejects_negative_price(client):
    response = await client.post("/api/videos", json={
        "title": "t", "description": "", "price": -1, "creator": "c", "creator_id": "c1",
        "thumbnail_url": "https://cdn.test/t.jpg", "video_url": "https://cdn.test/v.mp4",
    })
    assert response.status_code == 400


async def test_catalog_is_newest_first(client, create_video):
    first = await create_video(title="First")
    second = await create_video(title="Second")

    response = await client.get("/api/videos")
    assert response.status_code == 200
    assert [v["id"] for v in response.json()] == [second["id"], first["id"]]


async def test_filter_by_creator(client, create_video):
    mine = await create_video(creator_id="creator-a")
    await create_video(creator_id="creator-b")

    response = await client.get("/api/videos/creator/creator-a")
    assert [v["id"] for v in response.json()] == [mine["id"]]

    response = await client.get("/api/videos/creator/nobody")
    assert response.json() == []


async def test_get_video(client, create_video):
    video = await create_video(title="Single")

    response = await client.get(f"/api/videos/{video['id']}")
    assert response.status_code == 200
    assert response.json()["title"] == "Single"


async def test_get_unknown_video(client):
    response = await client.get(f"/api/videos/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Video not found"

    response = await client.get("/api/videos/not-a-uuid")
    assert response.status_code == 404


async def test_view_counter(client, create_video):
    video = await create_video()

    await client.post(f"/api/videos/{video['id']}/view")
    response = await client.post(f"/api/videos/{video['id']}/view")

    assert response.status_code == 200
    assert response.json()["views"] == 2


async def test_view_unknown_video(client):
    response = await client.post(f"/api/videos/{uuid.uuid4()}/view")
    assert response.status_code == 404


async def test_access_check(client, login, create_video):
    free = await create_video(price=0)
    premium = await create_video(price=80)
    viewer, _ = await login()

    response = await client.get(f"/api/videos/{free['id']}/access")
    assert response.json() == {"video_id": free["id"], "is_premium": False, "access": True}

    response = await client.get(f"/api/videos/{premium['id']}/access")
    assert response.json()["access"] is False

    response = await viewer.get(f"/api/videos/{premium['id']}/access")
    assert response.json()["access"] is False


async def test_delete_requires_admin(client, login, create_video):
    video = await create_video()

    response = await client.delete(f"/api/videos/{video['id']}")
    assert response.status_code == 401

    viewer, _ = await login()
    response = await viewer.delete(f"/api/videos/{video['id']}")
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


async def test_delete_removes_files_and_entry(client, admin_client, create_video, storage_backend):
    storage_backend.files = {"videos/9_talk.mp4": b"v", "thumbnails/9_talk.jpg": b"t"}
    video = await create_video(
        video_url=f"https://{CDN}/videos/9_talk.mp4",
        thumbnail_url=f"https://{CDN}/thumbnails/9_talk.jpg",
    )

    response = await admin_client.delete(f"/api/videos/{video['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert sorted(storage_backend.deleted) == ["thumbnails/9_talk.jpg", "videos/9_talk.mp4"]
    response = await client.get(f"/api/videos/{video['id']}")
    assert response.status_code == 404


async def test_delete_survives_storage_failure(client, admin_client, create_video, storage_backend):
    storage_backend.fail_deletes = True
    video = await create_video()

    response = await admin_client.delete(f"/api/videos/{video['id']}")
    assert response.status_code == 200

    response = await client.get(f"/api/videos/{video['id']}")
    assert response.status_code == 404

    response = await client.get("/api/videos")
    assert video["id"] not in [v["id"] for v in response.json()]


async def test_delete_skips_foreign_urls(admin_client, create_video, storage_backend):
    video = await create_video(video_url="https://youtube.example/watch?v=1", thumbnail_url="https://img.example/1.jpg")

    response = await admin_client.delete(f"/api/videos/{video['id']}")
    assert response.status_code == 200
    assert storage_backend.deleted == []


async def test_delete_unknown_video(admin_client):
    response = await admin_client.delete(f"/api/videos/{uuid.uuid4()}")
    assert response.status_code == 404
