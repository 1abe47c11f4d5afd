from entrytitles import api
from entrytitles.cache import load_titles
from entrytitles.config import Config
from entrytitles.services.index_service import IndexStatus, ReindexMode


def test_full_title_cache_lifecycle(tmp_path):
    data = tmp_path / "data"
    (data / "stories").mkdir(parents=True)
    (data / "home.txt").write_text("Home Page\n", encoding="utf-8")
    (data / "stories" / "first.html").write_text(
        "<html><head><title>First Story</title></head></html>", encoding="utf-8"
    )
    cachefile = tmp_path / "state" / "titles.dat"
    cfg = Config(titles_cachefile=str(cachefile))

    first = api.index_titles(data, config=cfg)
    assert first.result.mode == ReindexMode.ALL
    assert load_titles(cachefile) == {"home": "Home Page", "stories/first": "First Story"}

    (data / "stories" / "second.txt").write_text("Second Story\n", encoding="utf-8")
    second = api.index_titles(data, config=cfg)
    assert second.result.mutated == frozenset({"stories/second"})
    assert second.titles["stories/second"] == "Second Story"

    (data / "home.txt").write_text("Home Renamed\n", encoding="utf-8")
    third = api.index_titles(data, config=cfg)
    assert third.result.status == IndexStatus.UP_TO_DATE
    assert third.titles["home"] == "Home Page"

    (data / "stories" / "first.html").unlink()
    fourth = api.index_titles(data, config=cfg, reindex_cat="stories", delindex=True)
    assert fourth.result.mode == ReindexMode.CATEGORY
    assert "stories/first" in fourth.titles

    fifth = api.index_titles(data, config=cfg, delindex=True)
    assert "stories/first" not in fifth.titles

    sixth = api.index_titles(data, config=cfg, reindex_all=True)
    assert sixth.titles == {"home": "Home Renamed", "stories/second": "Second Story"}
    assert api.load_titles(config=cfg) == sixth.titles

    assert api.clear_titles(config=cfg) == 2
    assert api.load_titles(config=cfg) == {}
