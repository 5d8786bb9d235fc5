from furl import furl  # type: ignore[import-untyped]

from requests_auth0 import CallbackUrlCodeSource, CodeSource, StaticCodeSource


def test_static_code_source() -> None:
    source = StaticCodeSource("my_code", state="my_state")
    assert isinstance(source, CodeSource)
    assert source.get_code() == "my_code"
    assert source.get_state() == "my_state"

    assert StaticCodeSource(None).get_code() is None
    assert StaticCodeSource("").get_code() is None
    assert StaticCodeSource("my_code").get_state() is None


def test_callback_url_code_source() -> None:
    source = CallbackUrlCodeSource("https://my.app/callback?code=my_code&state=my_state")
    assert isinstance(source, CodeSource)
    assert source.get_code() == "my_code"
    assert source.get_state() == "my_state"
    assert source.params == {"code": "my_code", "state": "my_state"}


def test_callback_url_without_code() -> None:
    source = CallbackUrlCodeSource(furl("https://my.app/callback").add(args={"error": "access_denied"}))
    assert source.get_code() is None
    assert source.get_state() is None
    assert source.params == {"error": "access_denied"}

    assert CallbackUrlCodeSource("https://my.app/callback?code=").get_code() is None
