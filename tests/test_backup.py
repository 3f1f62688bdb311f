import json
from datetime import date

import pytest

from video_manager.migrations import DEFAULT_CATEGORIES, DEFAULT_LINK_CATEGORIES
from video_manager.services.backup_service import BackupService, InvalidBackupError


def _backup(videos=(), links=(), video_categories=(), link_categories=()):
    return {
        "version": "1.0",
        "exportedAt": "2025-01-01T00:00:00.000Z",
        "videos": list(videos),
        "videoCategories": list(video_categories),
        "links": list(links),
        "linkCategories": list(link_categories),
    }


async def _wipe(manager):
    """Reduce the collection to nothing, seeded categories included"""
    for video in await manager.get_videos():
        await manager.delete_video(video.id)
    for link in await manager.get_links():
        await manager.delete_link(link.id)
    for category in await manager.get_categories():
        await manager.delete_category(category.id)
    for category in await manager.get_link_categories():
        await manager.delete_link_category(category.id)


async def test_export_shape(manager):
    await manager.add_video(url="https://youtu.be/a", title="A", tags=["x"])
    await manager.add_link(url="https://example.com", title="Example")

    data = await BackupService(manager).export_data()

    assert data["version"] == "1.0"
    assert data["exportedAt"].endswith("Z")
    assert [v["title"] for v in data["videos"]] == ["A"]
    assert data["videos"][0]["tags"] == ["x"]
    assert [l["url"] for l in data["links"]] == ["https://example.com"]
    assert len(data["videoCategories"]) == len(DEFAULT_CATEGORIES)
    assert len(data["linkCategories"]) == len(DEFAULT_LINK_CATEGORIES)


def test_backup_filename():
    assert BackupService.backup_filename(date(2025, 3, 9)) == "manager-backup-2025-03-09.json"


async def test_write_backup(manager, tmp_path):
    await manager.add_video(url="https://youtu.be/a")

    path = await BackupService(manager).write_backup(str(tmp_path / "backups"))

    assert path.endswith(".json")
    data = json.loads(open(path).read())
    assert len(data["videos"]) == 1


async def test_round_trip_into_empty_collection(manager):
    await manager.add_category("Jazz", "1 1% 1%", parent_id=DEFAULT_CATEGORIES[0][0])
    for n in range(3):
        await manager.add_video(url=f"https://youtu.be/v{n}", category_id=DEFAULT_CATEGORIES[0][0])
    await manager.add_link(url="https://example.com")

    service = BackupService(manager)
    exported = await service.export_data()

    await _wipe(manager)
    report = await service.import_data(exported)

    assert len(await manager.get_videos()) == 3
    assert len(await manager.get_links()) == 1
    assert len(await manager.get_categories()) == 4
    assert len(await manager.get_link_categories()) == 3
    assert report.imported == {"videos": 3, "links": 1, "video_categories": 4, "link_categories": 3}
    assert report.total_skipped == 0

    # Items come back without their categories
    assert all(v.category_id is None for v in await manager.get_videos())
    assert all(c.parent_id is None for c in await manager.get_categories())


async def test_import_skips_existing_urls(manager):
    await manager.add_video(url="https://youtu.be/exists")

    report = await BackupService(manager).import_data(_backup(videos=[
        {"url": "https://youtu.be/exists", "title": "Dupe"},
        {"url": "https://youtu.be/new1", "title": "New 1"},
        {"url": "https://youtu.be/new2", "title": "New 2"},
    ]))

    assert report.imported["videos"] == 2
    assert report.skipped["videos"] == 1
    assert len(await manager.get_videos()) == 3


async def test_import_skips_duplicates_within_backup(manager):
    report = await BackupService(manager).import_data(_backup(links=[
        {"url": "https://example.com", "title": "One"},
        {"url": "https://example.com", "title": "Same"},
    ]))

    assert report.imported["links"] == 1
    assert report.skipped["links"] == 1


async def test_import_matches_categories_by_name(manager):
    report = await BackupService(manager).import_data(_backup(
        video_categories=[
            {"id": "old-1", "name": "music", "color": "1 1% 1%"},
            {"id": "old-2", "name": "Cooking", "color": "2 2% 2%"},
        ],
    ))

    assert report.skipped["video_categories"] == 1
    assert report.imported["video_categories"] == 1
    names = [c.name for c in await manager.get_categories()]
    assert names.count("Music") == 1
    assert "Cooking" in names


async def test_import_reads_camel_case_backups(manager):
    await BackupService(manager).import_data(_backup(videos=[{
        "url": "https://youtu.be/a",
        "title": "Legacy",
        "thumbnailUrl": "https://img.youtube.com/vi/a/mqdefault.jpg",
        "channelName": "Someone",
        "categoryId": DEFAULT_CATEGORIES[0][0],
        "tags": ["Old"],
    }]))

    video = (await manager.get_videos())[0]
    assert video.thumbnail_url == "https://img.youtube.com/vi/a/mqdefault.jpg"
    assert video.channel_name == "Someone"
    assert video.tags == ["old"]
    assert video.category_id is None


async def test_import_keep_categories(manager):
    backup = _backup(
        video_categories=[
            {"id": "child", "name": "Jazz", "color": "1 1% 1%", "parent_id": "parent"},
            {"id": "parent", "name": "Genres", "color": "2 2% 2%", "parent_id": None},
            {"id": "music", "name": "Music", "color": "3 3% 3%", "parent_id": None},
        ],
        videos=[
            {"url": "https://youtu.be/a", "title": "A", "category_id": "child"},
            {"url": "https://youtu.be/b", "title": "B", "category_id": "music"},
            {"url": "https://youtu.be/c", "title": "C", "category_id": "unknown"},
        ],
    )

    await BackupService(manager).import_data(backup, keep_categories=True)

    categories = {c.name: c for c in await manager.get_categories()}
    assert categories["Jazz"].parent_id == categories["Genres"].id

    videos = {v.title: v for v in await manager.get_videos()}
    assert videos["A"].category_id == categories["Jazz"].id
    assert videos["B"].category_id == DEFAULT_CATEGORIES[0][0]
    assert videos["C"].category_id is None


@pytest.mark.parametrize("data", [{}, {"videos": []}, [], "nope"])
async def test_import_rejects_invalid_format(manager, data):
    with pytest.raises(InvalidBackupError, match="Invalid backup file format"):
        await BackupService(manager).import_data(data)


async def test_import_file(manager, tmp_path):
    path = tmp_path / "backup.json"
    path.write_text(json.dumps(_backup(links=[{"url": "https://example.com", "title": "Ex"}])))

    report = await BackupService(manager).import_file(str(path))
    assert report.imported["links"] == 1

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(InvalidBackupError):
        await BackupService(manager).import_file(str(broken))


async def test_keep_categories_never_nests_under_a_subcategory(manager):
    # "Jazz" already exists here as a subcategory of Music
    await manager.add_category("Jazz", "1 1% 1%", parent_id=DEFAULT_CATEGORIES[0][0])

    backup = _backup(
        video_categories=[
            {"id": "x", "name": "jazz", "color": "1 1% 1%", "parent_id": None},
            {"id": "y", "name": "Bebop", "color": "2 2% 2%", "parent_id": "x"},
            {"id": "z", "name": "Hard bop", "color": "3 3% 3%", "parent_id": "y"},
        ],
        videos=[{"url": "https://youtu.be/bebop", "title": "Bebop", "category_id": "y"}],
    )

    report = await BackupService(manager).import_data(backup, keep_categories=True)

    assert report.imported["video_categories"] == 2
    assert report.imported["videos"] == 1

    categories = {c.name: c for c in await manager.get_categories()}
    assert categories["Bebop"].parent_id is None
    assert categories["Hard bop"].parent_id == categories["Bebop"].id

    video = (await manager.get_videos())[0]
    assert video.category_id == categories["Bebop"].id
