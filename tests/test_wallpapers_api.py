from fastapi.testclient import TestClient

from conftest import API, create_wallpaper, login, register, wallpaper_payload

WALLPAPERS = f"{API}/wallpapers"


def test_create_requires_login(client: TestClient) -> None:
    response = client.post(WALLPAPERS, json=wallpaper_payload())
    assert response.status_code == 401
    assert response.json()["message"] == "No access token found"


def test_create_assigns_caller_and_ignores_server_fields(admin_client: TestClient) -> None:
    me = admin_client.get(f"{API}/auth/me").json()["data"]
    response = admin_client.post(
        WALLPAPERS,
        json=wallpaper_payload(title="  Krishna at dusk  ", downloadCount=99, adminId="f" * 32),
    )
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["message"] == "Wallpaper created successfully"
    data = body["data"]
    assert data["title"] == "Krishna at dusk"
    assert data["downloadCount"] == 0
    assert data["adminId"] == me["_id"]
    assert data["isActive"] is True
    assert data["imageUrl"] == "https://images.example.com/krishna-flute.jpg"
    assert len(data["_id"]) == 32


def test_create_reports_field_errors(admin_client: TestClient) -> None:
    response = admin_client.post(
        WALLPAPERS,
        json=wallpaper_payload(
            title="ab",
            imageUrl="not a url",
            keywords=[],
            category="lord_zeus",
            wallpaperStyle="cartoon",
        ),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid input parameters"
    messages = {error["path"]: error["message"] for error in body["data"]}
    assert messages["title"] == "Title must be at least 3 characters long"
    assert messages["imageUrl"] == "Please provide a valid URL"
    assert messages["keywords"] == "At least one keyword is required"
    assert messages["category"].startswith("Category must be one of: lord_krishna, lord_ram")
    assert messages["wallpaperStyle"] == "Style must be either 'anime' or 'real'"


def test_create_rejects_too_many_keywords(admin_client: TestClient) -> None:
    response = admin_client.post(
        WALLPAPERS, json=wallpaper_payload(keywords=[f"tag{index}" for index in range(21)])
    )
    assert response.status_code == 400
    assert response.json()["data"][0]["message"] == "Maximum 20 keywords allowed"


def test_store_rejects_url_the_request_accepted(admin_client: TestClient) -> None:
    response = admin_client.post(
        WALLPAPERS, json=wallpaper_payload(imageUrl="https://cdn.example.com/a.jpg?size=large")
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Please provide a valid URL"}


def test_detail_expands_owner_and_counts_download(admin_client: TestClient) -> None:
    created = create_wallpaper(admin_client)

    response = admin_client.get(f"{WALLPAPERS}/{created['_id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Wallpaper retrieved successfully"
    data = body["data"]
    assert data["downloadCount"] == 1
    assert data["adminId"] == {
        "_id": created["adminId"],
        "firstName": "Radha",
        "lastName": "Rani",
        "email": "radha@example.com",
    }
    for field in ("title", "description", "imageUrl", "keywords", "category", "wallpaperStyle"):
        assert data[field] == created[field]

    second = admin_client.get(f"{WALLPAPERS}/{created['_id']}")
    assert second.json()["data"]["downloadCount"] == 2


def test_detail_with_bad_or_missing_id(client: TestClient) -> None:
    malformed = client.get(f"{WALLPAPERS}/abc")
    assert malformed.status_code == 400
    assert malformed.json() == {"success": False, "message": "Invalid wallpaper ID"}

    missing = client.get(f"{WALLPAPERS}/{'a' * 32}")
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Wallpaper not found"}


def test_download_endpoint_increments(admin_client: TestClient) -> None:
    created = create_wallpaper(admin_client)

    first = admin_client.post(f"{WALLPAPERS}/{created['_id']}/download")
    assert first.status_code == 200
    assert first.json() == {
        "success": True,
        "message": "Download count incremented successfully",
        "data": {"downloadCount": 1},
    }
    second = admin_client.post(f"{WALLPAPERS}/{created['_id']}/download")
    assert second.json()["data"] == {"downloadCount": 2}

    assert admin_client.post(f"{WALLPAPERS}/{'b' * 32}/download").status_code == 404
    assert admin_client.post(f"{WALLPAPERS}/nope/download").status_code == 400


def test_update_is_partial(admin_client: TestClient) -> None:
    created = create_wallpaper(admin_client)

    response = admin_client.put(
        f"{WALLPAPERS}/{created['_id']}", json={"title": "Krishna by the river", "isActive": False}
    )
    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert response.json()["message"] == "Wallpaper updated successfully"
    assert data["title"] == "Krishna by the river"
    assert data["isActive"] is False
    assert data["description"] == created["description"]
    assert data["keywords"] == created["keywords"]


def test_update_validates_supplied_fields(admin_client: TestClient) -> None:
    created = create_wallpaper(admin_client)
    response = admin_client.put(f"{WALLPAPERS}/{created['_id']}", json={"wallpaperStyle": "cartoon"})
    assert response.status_code == 400
    assert response.json()["data"][0]["path"] == "wallpaperStyle"

    missing = admin_client.put(f"{WALLPAPERS}/{'c' * 32}", json={"title": "Whatever"})
    assert missing.status_code == 404


def test_delete_wallpaper(admin_client: TestClient) -> None:
    created = create_wallpaper(admin_client)

    response = admin_client.delete(f"{WALLPAPERS}/{created['_id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Wallpaper deleted successfully"}
    assert admin_client.get(f"{WALLPAPERS}/{created['_id']}").status_code == 404
    assert admin_client.delete(f"{WALLPAPERS}/{created['_id']}").status_code == 404


def test_list_pagination(admin_client: TestClient) -> None:
    for title in ("Alpha wallpaper", "Bravo wallpaper", "Charlie wallpaper"):
        create_wallpaper(admin_client, title=title)

    first = admin_client.get(WALLPAPERS, params={"limit": 2, "sortBy": "title", "sortOrder": "asc"})
    assert first.status_code == 200
    data = first.json()["data"]
    assert first.json()["message"] == "Wallpapers retrieved successfully"
    assert [item["title"] for item in data["wallpapers"]] == ["Alpha wallpaper", "Bravo wallpaper"]
    assert data["wallpapers"][0]["adminId"]["firstName"] == "Radha"
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalWallpapers": 3,
        "limit": 2,
        "hasNextPage": True,
        "hasPrevPage": False,
    }

    second = admin_client.get(
        WALLPAPERS, params={"page": 2, "limit": 2, "sortBy": "title", "sortOrder": "asc"}
    ).json()["data"]
    assert [item["title"] for item in second["wallpapers"]] == ["Charlie wallpaper"]
    assert second["pagination"]["hasNextPage"] is False
    assert second["pagination"]["hasPrevPage"] is True


def test_list_empty_catalogue(client: TestClient) -> None:
    data = client.get(WALLPAPERS).json()["data"]
    assert data["wallpapers"] == []
    assert data["pagination"]["totalPages"] == 0
    assert data["pagination"]["totalWallpapers"] == 0


def test_list_filters(admin_client: TestClient) -> None:
    create_wallpaper(admin_client)
    create_wallpaper(
        admin_client,
        title="Shiva in meditation",
        description="Mahadev meditating on Mount Kailash",
        keywords=["Mahadev", "kailash"],
        category="lord_shiva",
        wallpaperStyle="anime",
    )
    hidden = create_wallpaper(admin_client, title="Hidden wallpaper", category="others")
    admin_client.put(f"{WALLPAPERS}/{hidden['_id']}", json={"isActive": False})

    def titles(**params):
        response = admin_client.get(WALLPAPERS, params=params)
        assert response.status_code == 200, response.text
        return sorted(item["title"] for item in response.json()["data"]["wallpapers"])

    assert titles(category="lord_shiva") == ["Shiva in meditation"]
    assert titles(category="lord_shiva", wallpaperStyle="anime") == ["Shiva in meditation"]
    assert titles(category="lord_krishna", wallpaperStyle="anime") == []
    assert titles(wallpaperStyle="real", category="all") == ["Hidden wallpaper", "Krishna with flute"]
    assert titles(keyword="MAHADEV") == ["Shiva in meditation"]
    assert titles(keyword="kailash") == ["Shiva in meditation"]
    assert titles(keyword="flute") == ["Hidden wallpaper", "Krishna with flute"]
    assert titles(keyword="100%") == []
    # Keywords match element by element, never the stored array text.
    for fragment in (",", "\"", "[", "krishna\", \"flute"):
        assert titles(keyword=fragment) == []
    assert titles(isActive="false") == ["Hidden wallpaper"]
    assert titles(isActive="true") == ["Krishna with flute", "Shiva in meditation"]
    assert len(titles(isActive="maybe")) == 3


def test_list_rejects_invalid_query(client: TestClient) -> None:
    response = client.get(WALLPAPERS, params={"page": 0, "sortBy": "rating"})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid query parameters"
    assert {error["path"] for error in body["data"]} == {"page", "sortBy"}

    bad_category = client.get(WALLPAPERS, params={"category": "lord_zeus"})
    assert bad_category.status_code == 400

    huge = client.get(WALLPAPERS, params={"limit": "99999999999999999999"})
    assert huge.status_code == 400
    assert huge.json()["message"] == "Invalid query parameters"
    assert huge.json()["data"][0]["path"] == "limit"


def test_home_aggregates_active_wallpapers(admin_client: TestClient) -> None:
    popular = create_wallpaper(admin_client, title="Popular Krishna")
    create_wallpaper(admin_client, title="Hanuman", category="lord_hanuman", wallpaperStyle="anime")
    hidden = create_wallpaper(admin_client, title="Hidden Shiva", category="lord_shiva")
    admin_client.put(f"{WALLPAPERS}/{hidden['_id']}", json={"isActive": False})
    for _ in range(3):
        admin_client.post(f"{WALLPAPERS}/{popular['_id']}/download")
    admin_client.post(f"{WALLPAPERS}/{hidden['_id']}/download")

    response = admin_client.get(f"{WALLPAPERS}/home")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Home screen data retrieved successfully"
    data = body["data"]

    assert [item["title"] for item in data["featured"]] == ["Popular Krishna", "Hanuman"]
    assert data["featured"][0]["downloadCount"] == 3
    assert {item["title"] for item in data["recent"]} == {"Popular Krishna", "Hanuman"}
    assert [bucket["category"] for bucket in data["categories"]] == ["lord_krishna", "lord_hanuman"]
    assert data["categories"][0]["wallpapers"][0]["_id"] == popular["_id"]
    assert data["statistics"]["totalWallpapers"] == 2
    assert data["statistics"]["totalDownloads"] == 3
    assert data["statistics"]["availableStyles"] == ["anime", "real"]
    assert "others" in data["statistics"]["availableCategories"]


def test_owner_removal_leaves_wallpaper_unowned(admin_client: TestClient) -> None:
    register(admin_client, email="other@example.com", firstName="Sita")
    login(admin_client, email="other@example.com")
    created = create_wallpaper(admin_client)
    owner_id = created["adminId"]

    login(admin_client)
    assert admin_client.delete(f"{API}/auth/{owner_id}").status_code == 200

    detail = admin_client.get(f"{WALLPAPERS}/{created['_id']}").json()["data"]
    assert detail["adminId"] is None


def test_unknown_routes_use_envelope(client: TestClient) -> None:
    response = client.get("/api/v1/admin/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "404 not found!"}

    wrong_method = client.patch(f"{WALLPAPERS}/{'a' * 32}")
    assert wrong_method.status_code == 404
    assert wrong_method.json() == {"success": False, "message": "404 not found!"}


def test_create_with_token_of_deleted_admin(admin_client: TestClient) -> None:
    register(admin_client, email="other@example.com")
    login(admin_client, email="other@example.com")
    stale_token = admin_client.cookies.get("access_token")
    owner_id = admin_client.get(f"{API}/auth/me").json()["data"]["_id"]

    login(admin_client)
    assert admin_client.delete(f"{API}/auth/{owner_id}").status_code == 200

    admin_client.cookies.clear()
    admin_client.cookies.set("access_token", stale_token)
    response = admin_client.post(WALLPAPERS, json=wallpaper_payload())
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "Invalid token or token expired, authorization denied",
    }
    assert admin_client.get(WALLPAPERS).json()["data"]["wallpapers"] == []
