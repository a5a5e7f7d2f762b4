from cluster_request.core.options import (
    BASELINE_REQ_OPTIONS,
    bind_defaults,
    build_default_options,
    compose_options,
    deep_merge,
)


def test_build_default_options_overrides_baseline():
    opts = build_default_options({"gzip": False, "headers": {"x-team": "geo"}})
    assert opts == {"method": "GET", "json": True, "gzip": False, "headers": {"x-team": "geo"}}
    assert BASELINE_REQ_OPTIONS["gzip"] is True


def test_later_layer_wins_and_nested_keys_survive():
    base = build_default_options({"headers": {"a": "1", "b": "1"}, "timeout": 3})
    opts = compose_options(
        base,
        "http://geos-api:80/",
        headers={"b": "2", "c": "2"},
        overrides={"method": "POST", "headers": {"c": "3"}, "qs": {"page": 2}},
    )

    assert opts["url"] == "http://geos-api:80/"
    assert opts["method"] == "POST"
    assert opts["headers"] == {"a": "1", "b": "2", "c": "3"}
    assert opts["timeout"] == 3
    assert opts["qs"] == {"page": 2}


def test_overrides_can_replace_url():
    opts = compose_options({}, "http://a:80/", overrides={"url": "http://b:81/"})
    assert opts["url"] == "http://b:81/"


def test_merge_does_not_mutate_inputs():
    base = {"headers": {"a": "1"}}
    extra = {"headers": {"b": "2"}}
    out = deep_merge(base, extra)
    out["headers"]["c"] = "3"

    assert base == {"headers": {"a": "1"}}
    assert extra == {"headers": {"b": "2"}}


def test_non_mapping_replaces_mapping():
    assert deep_merge({"headers": {"a": "1"}}, {"headers": None}) == {"headers": None}


def test_bind_defaults_merges_overrides():
    calls = []

    def transport(req_options, callback):
        calls.append(req_options)
        callback(None, None, None)

    bound = bind_defaults(transport, {"url": "http://a:80/", "headers": {"a": "1"}})
    bound({"headers": {"b": "2"}}, lambda *args: None)
    bound(None, lambda *args: None)

    assert calls[0] == {"url": "http://a:80/", "headers": {"a": "1", "b": "2"}}
    assert calls[1] == {"url": "http://a:80/", "headers": {"a": "1"}}
