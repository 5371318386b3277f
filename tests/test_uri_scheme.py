import pytest

from ssas.uri_scheme import (
    PROTOCOL_SCHEME,
    SCHEME,
    build_callback,
    check_query_value,
    decode_component,
    encode_component,
    normalize_callback_path,
    parse_exp,
    parse_query,
    split_callback,
    split_redirect_uri,
    strip_prefix,
)


def test_scheme_constants() -> None:
    assert SCHEME == "sid"
    assert PROTOCOL_SCHEME == "web+sid"


def test_normalize_callback_path_only_strips_https() -> None:
    assert normalize_callback_path("https://a.com/x") == "a.com/x"
    assert normalize_callback_path("//a.com/x") == "a.com/x"
    assert normalize_callback_path("https:////a.com/x") == "a.com/x"
    # other schemes are left alone
    assert normalize_callback_path("http://a.com/x") == "http://a.com/x"


def test_build_callback_orders_uid_before_exp() -> None:
    assert build_callback("a.com/x", "u") == "a.com/x?uid=u"
    assert build_callback("a.com/x", "u", 5) == "a.com/x?uid=u&exp=5"


def test_strip_prefix_forms() -> None:
    assert strip_prefix("sid:a.com?uid=1") == ("sid", "a.com?uid=1")
    assert strip_prefix("web+sid:a.com?uid=1") == ("web+sid", "a.com?uid=1")
    assert strip_prefix("web+sid://a.com?uid=1") == ("web+sid", "a.com?uid=1")
    assert strip_prefix("a.com?uid=1") == (None, "a.com?uid=1")
    assert strip_prefix("//a.com?uid=1") == (None, "a.com?uid=1")


def test_strip_prefix_rejects_authority_for_sid() -> None:
    with pytest.raises(ValueError):
        strip_prefix("sid://a.com?uid=1")


def test_split_callback_requires_single_query() -> None:
    assert split_callback("a.com/x?uid=1") == ("a.com/x", "uid=1")
    for bad in ("a.com/x", "a.com/x?uid=1?exp=2", "?uid=1", ""):
        with pytest.raises(ValueError):
            split_callback(bad)


def test_parse_query_keeps_order_and_raw_values() -> None:
    params = parse_query("exp=2&uid=a=b&skip&redirectUri=x%2Fy")
    assert list(params) == ["exp", "uid", "redirectUri"]
    assert params["uid"] == "a=b"
    assert params["redirectUri"] == "x%2Fy"


def test_parse_query_rejects_duplicates() -> None:
    with pytest.raises(ValueError):
        parse_query("uid=1&uid=1")


def test_check_query_value() -> None:
    check_query_value("uid", "4e8a8445762c491fa7c5cf74a0a745e5")
    for bad in ("a&b", "a#b", "a?b", "a=b"):
        with pytest.raises(ValueError):
            check_query_value("uid", bad)


def test_parse_exp() -> None:
    assert parse_exp("1637240507") == 1637240507
    assert parse_exp("+3") == 3
    for bad in ("", " 1", "1e3", "0x10", "١"):
        with pytest.raises(ValueError):
            parse_exp(bad)


def test_split_redirect_uri() -> None:
    assert split_redirect_uri("app://host/path") == ("app", "host/path")
    assert split_redirect_uri("app://") == ("app", None)
    assert split_redirect_uri("app:") == ("app", None)
    assert split_redirect_uri("app:rest") == ("app", "rest")
    for bad in ("app", "app://h:1", " :x", "a&b:x", "a#b:x"):
        with pytest.raises(ValueError):
            split_redirect_uri(bad)


def test_component_encoding() -> None:
    assert encode_component("redirect.com/path") == "redirect.com%2Fpath"
    assert encode_component("a b&c") == "a%20b%26c"
    assert decode_component("redirect.com%2Fpath") == "redirect.com/path"
    assert decode_component("a+b%2Bc") == "a b+c"
