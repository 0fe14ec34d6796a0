from types import SimpleNamespace

from backend.portfolio.utils.bts import clean_urls, plan_append, plan_replace


def _row(id, url, sort_order):
    return SimpleNamespace(id=id, image_url=url, sort_order=sort_order)


def test_clean_urls():
    assert clean_urls(None) == []
    assert clean_urls([" a.jpg", "", "b.jpg", "a.jpg", 3, None, "  "]) == ["a.jpg", "b.jpg"]


def test_append_continues_after_highest_sort_order():
    existing = [_row(1, "a.jpg", 0), _row(2, "b.jpg", 4)]
    plan = plan_append(existing, ["b.jpg", "c.jpg", "d.jpg"])
    assert [(i.image_url, i.sort_order, i.caption) for i in plan.inserts] == [
        ("c.jpg", 5, "BTS Image 1"),
        ("d.jpg", 6, "BTS Image 2"),
    ]
    assert plan.duplicates_skipped == 1
    assert plan.delete_ids == []
    assert plan.reorder == {}


def test_append_to_empty_project_uses_caption():
    plan = plan_append([], ["a.jpg"], caption="On set")
    assert plan.inserts[0].sort_order == 0
    assert plan.inserts[0].caption == "On set"


def test_append_nothing():
    plan = plan_append([_row(1, "a.jpg", 0)], [])
    assert not plan.changed
    assert plan.duplicates_skipped == 0


def test_replace_deletes_reorders_and_inserts():
    existing = [_row(1, "a.jpg", 0), _row(2, "b.jpg", 1), _row(3, "c.jpg", 2)]
    plan = plan_replace(existing, ["c.jpg", "new.jpg", "a.jpg"])
    assert plan.delete_ids == [2]
    assert plan.reorder == {3: 0, 1: 2}
    assert [(i.image_url, i.sort_order, i.caption) for i in plan.inserts] == [("new.jpg", 1, "BTS Media 2")]


def test_replace_with_same_order_is_a_no_op():
    existing = [_row(1, "a.jpg", 0), _row(2, "b.jpg", 1)]
    assert not plan_replace(existing, ["a.jpg", "b.jpg"]).changed


def test_replace_with_empty_list_clears():
    existing = [_row(1, "a.jpg", 0), _row(2, "b.jpg", 1)]
    plan = plan_replace(existing, [])
    assert plan.delete_ids == [1, 2]
    assert plan.inserts == []
