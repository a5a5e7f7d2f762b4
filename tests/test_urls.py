from cluster_request.core.urls import has_port, resolve_url


def test_appends_default_port():
    assert resolve_url("geos-api", "/x", 80) == "http://geos-api:80/x"


def test_keeps_explicit_port():
    assert resolve_url("badjson:443", "/x", 80) == "http://badjson:443/x"
    assert has_port("badjson:443")
    assert not has_port("geos-api")


def test_inserts_leading_slash():
    assert resolve_url("geos-api", "x/y", 8080) == "http://geos-api:8080/x/y"
    assert resolve_url("geos-api", "", 80) == "http://geos-api:80/"


def test_query_string_is_kept_verbatim():
    assert resolve_url("geos-api", "geos?id=1", 80) == "http://geos-api:80/geos?id=1"
