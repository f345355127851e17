from preset_engine.settings_merge import merge_settings, overwrite_keys, resolve_defaultsort
from tests.factories import DataFieldFactory


def test_numeric_defaultsort_is_reset(store, module):
    assert resolve_defaultsort({"defaultsort": "5"}, store, module.id) == 0


def test_named_defaultsort_resolves_to_field_id(store, module):
    DataFieldFactory(module=module, name="Title")
    score = DataFieldFactory(module=module, name="Score")

    assert resolve_defaultsort({"defaultsort": "Score"}, store, module.id) == score.id


def test_decimal_and_exponent_defaultsort_are_numeric(store, module):
    DataFieldFactory(module=module, name="1e3")

    assert resolve_defaultsort({"defaultsort": "1e3"}, store, module.id) == 0
    assert resolve_defaultsort({"defaultsort": " 5.0 "}, store, module.id) == 0
    assert resolve_defaultsort({"defaultsort": ".5"}, store, module.id) == 0


def test_float_words_are_field_names(store, module):
    infinity = DataFieldFactory(module=module, name="Infinity")
    nan = DataFieldFactory(module=module, name="nan")
    grouped = DataFieldFactory(module=module, name="1_0")

    assert resolve_defaultsort({"defaultsort": "Infinity"}, store, module.id) == infinity.id
    assert resolve_defaultsort({"defaultsort": "nan"}, store, module.id) == nan.id
    assert resolve_defaultsort({"defaultsort": "1_0"}, store, module.id) == grouped.id


def test_unknown_named_defaultsort_is_zero(store, module):
    assert resolve_defaultsort({"defaultsort": "Nowhere"}, store, module.id) == 0


def test_missing_defaultsort_is_zero(store, module):
    assert resolve_defaultsort({}, store, module.id) == 0
    assert resolve_defaultsort({"defaultsort": ""}, store, module.id) == 0


def test_overwrite_keys():
    settings = {"maxentries": "3", "listtemplate": "x"}
    assert overwrite_keys(settings, True) == ["maxentries", "listtemplate"]
    assert "maxentries" not in overwrite_keys(settings, False)
    assert "asearchtemplate" in overwrite_keys(settings, False)


def test_templates_only_without_overwrite(store, module):
    settings = {"maxentries": "3", "intro": "New intro", "listtemplate": "<p>new</p>",
                "defaultsortdir": "1", "instance": module.id}

    written = merge_settings(module, settings, False, store)

    assert module.maxentries == 10
    assert module.intro == "Existing intro"
    assert module.listtemplate == "<p>new</p>"
    assert module.defaultsortdir == 1
    assert module.defaultsort == 0
    assert "maxentries" not in written


def test_everything_with_overwrite(store, module):
    settings = {"maxentries": "3", "intro": "New intro", "listtemplate": "<p>new</p>",
                "instance": module.id}

    merge_settings(module, settings, True, store)

    assert module.maxentries == 3
    assert module.intro == "New intro"
    assert module.listtemplate == "<p>new</p>"


def test_keys_absent_from_preset_are_left_alone(store, module):
    merge_settings(module, {"listtemplate": "<p>new</p>"}, False, store)

    assert module.singletemplate == "<p>old single</p>"
