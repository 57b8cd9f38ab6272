import config
import migrate_data
import store


def test_migrate_bootstraps_empty_data_dir(capsys):
    assert migrate_data.migrate() == (0, 0)
    assert config.POSTS_PATH.exists()
    assert config.ADMIN_PATH.exists()

    migrate_data.main()
    assert "0 posts, 0 comments updated" in capsys.readouterr().out


def test_migrate_fills_legacy_records():
    store.save(
        config.POSTS_PATH,
        [
            {"id": "1", "title": "Old", "content": "x", "likes": 5, "tags": "a, b"},
            {
                "id": "2",
                "title": "Current",
                "content": "y",
                "category": "News",
                "tags": [],
                "mainImage": "",
                "extraImages": [],
                "likes": ["1.2.3.4"],
                "createdAt": "2024-01-01T00:00:00.000Z",
                "updatedAt": "2024-01-01T00:00:00.000Z",
            },
        ],
    )
    store.save(config.COMMENTS_PATH, [{"id": "c1", "postId": "1", "text": "hi"}])

    assert migrate_data.migrate() == (1, 1)

    old, current = store.load(config.POSTS_PATH, [])
    assert old["likes"] == []
    assert old["tags"] == ["a", "b"]
    assert old["category"] == "Uncategorized"
    assert old["extraImages"] == []
    assert old["createdAt"] == old["updatedAt"]
    assert current["likes"] == ["1.2.3.4"]

    (comment,) = store.load(config.COMMENTS_PATH, [])
    assert comment["name"] == "Anonymous"
    assert comment["ip"] == ""
