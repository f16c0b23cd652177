from devconsole.messages import CLEARED_KEY, ERROR, INFO, LOG, WARNING, MessageStore


def test_writing_existing_key_overwrites_in_place():
    store = MessageStore()
    store.info("build", "v1")
    store.info("other", "x")
    store.info("build", "v2")

    assert store.entries(INFO) == [("build", "v2"), ("other", "x")]


def test_categories_are_independent():
    store = MessageStore()
    store.warn("disk", "low")
    store.error("disk", "full")

    assert store.get(WARNING, "disk") == "low"
    assert store.get(ERROR, "disk") == "full"
    assert len(store) == 2


def test_log_without_value_is_ignored():
    store = MessageStore()
    assert store.log("lonely") is False
    assert store.entries(LOG) == []


def test_info_without_value_stores_empty_text():
    store = MessageStore()
    store.info("ping")
    assert store.entries(INFO) == [("ping", "")]


def test_clear_leaves_single_info_entry():
    store = MessageStore()
    store.log("a", 1)
    store.warn("b", 2)
    store.error("c", 3)
    store.info("d", 4)

    store.clear()

    assert [(name, entries) for name, entries in store.categories() if entries] == [
        (INFO, [(CLEARED_KEY, "")])
    ]


def test_categories_follow_display_order():
    store = MessageStore()
    names = [name for name, _ in store.categories()]
    assert names == [INFO, ERROR, WARNING, LOG]
