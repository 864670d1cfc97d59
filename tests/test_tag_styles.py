import json

from bible_reader.core.exceptions import StorageError
from bible_reader.core.tag_styles import (
    DEFAULT_TAG_STYLES,
    TAG_STYLES_KEY,
    TagRegistry,
    TagStyle,
    load_tag_registry,
    load_tag_styles,
    reset_tag_styles,
    save_tag_styles,
    validate_tag_styles,
)


def test_defaults_cover_required_tags():
    names = [style.name for style in DEFAULT_TAG_STYLES]
    assert names == ["b", "i", "u", "FN", "RF", "Rf", "CM", "V", "CI", "PI1"]
    registry = TagRegistry.default()
    assert registry.by_name("CM").ignored is True
    assert registry.by_name("RF").close_tag == "<Rf>"
    assert registry.by_name("Rf").open_tag == "<Rf>"
    assert registry.by_open_tag("<PI1>").css_class == "ml-6 inline-block"


def test_open_tag_lookup_is_case_sensitive():
    registry = TagRegistry.default()
    assert registry.by_open_tag("<RF>").name == "RF"
    assert registry.by_open_tag("<Rf>").name == "Rf"
    assert registry.by_open_tag("<rf>") is None


def test_load_without_store_returns_defaults():
    assert load_tag_styles(None) == list(DEFAULT_TAG_STYLES)


def test_load_not_json_falls_back_to_defaults(dict_store):
    dict_store.set(TAG_STYLES_KEY, "not-json")
    styles = load_tag_styles(dict_store)
    assert styles == list(DEFAULT_TAG_STYLES)
    assert len(styles) >= 9


def test_load_non_array_falls_back_to_defaults(dict_store):
    dict_store.set(TAG_STYLES_KEY, json.dumps({"name": "b"}))
    assert load_tag_styles(dict_store) == list(DEFAULT_TAG_STYLES)


def test_load_drops_invalid_entries(dict_store):
    dict_store.set(
        TAG_STYLES_KEY,
        json.dumps(
            [
                {"name": "b", "open_tag": "<b>", "close_tag": "</b>", "css_class": "strong"},
                {"name": "broken"},
                "not an object",
                {"name": "sc", "openTag": "<sc>", "closeTag": "</sc>", "cssClass": "small-caps"},
            ]
        ),
    )
    styles = load_tag_styles(dict_store)
    assert [s.name for s in styles] == ["b", "sc"]
    assert styles[1].css_class == "small-caps"


def test_load_all_invalid_entries_uses_defaults(dict_store):
    dict_store.set(TAG_STYLES_KEY, json.dumps([{"name": "x"}, 3]))
    assert load_tag_styles(dict_store) == list(DEFAULT_TAG_STYLES)


def test_duplicate_names_keep_first():
    styles = validate_tag_styles(
        [
            {"name": "b", "open_tag": "<b>", "close_tag": "</b>"},
            {"name": "b", "open_tag": "<B>", "close_tag": "</B>"},
        ]
    )
    assert len(styles) == 1
    assert styles[0].open_tag == "<b>"


def test_save_and_reset_round_trip(dict_store):
    custom = [TagStyle(name="sc", open_tag="<sc>", close_tag="</sc>", css_class="small-caps")]
    save_tag_styles(dict_store, custom)
    assert load_tag_registry(dict_store).by_name("sc") is not None

    reset_tag_styles(dict_store)
    assert load_tag_styles(dict_store) == list(DEFAULT_TAG_STYLES)


def test_storage_failure_is_not_raised():
    class BrokenStore:
        def get(self, key):
            raise StorageError("disk gone")

    assert load_tag_styles(BrokenStore()) == list(DEFAULT_TAG_STYLES)
