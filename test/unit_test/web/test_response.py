"""
Unit tests for the web UI Response.

This test suite covers:
- Header emission on XHR requests (redirect, rerender layout, reload CSS, refresh)
- Redirects on full-page requests
- Content type handling
- Cookie batching and suppression for API requests
- redirect_and_exit session handling and control flow
- Copying metadata into JSON responses
"""

from unittest.mock import patch
from urllib.parse import unquote

import pytest

from icingaweb.web.cookie import Cookie
from icingaweb.web.errors import HeadersAlreadySentError, NoRequestContextError
from icingaweb.web.json_response import JsonResponse
from icingaweb.web.response import RedirectAndExit, Response
from icingaweb.web.url import Url


class TestResponseAccessors:
    """Test simple getters and setters."""

    def test_defaults(self, make_request):
        response = Response(make_request())

        assert response.get_auto_refresh_interval() is None
        assert response.is_reload_css() is None
        assert response.get_rerender_layout() is False
        assert response.get_content_type() == "text/html"
        assert len(response.get_cookies()) == 0

    def test_setters_chain(self, make_request):
        response = Response(make_request())

        result = (
            response.set_auto_refresh_interval(10)
            .set_reload_css(True)
            .set_rerender_layout()
            .set_content_type("text/plain")
            .set_cookie(Cookie("foo", "bar"))
        )

        assert result is response
        assert response.get_auto_refresh_interval() == 10
        assert response.is_reload_css() is True
        assert response.get_rerender_layout() is True
        assert response.get_content_type() == "text/plain"

    def test_set_rerender_layout_coerces_to_bool(self, make_request):
        response = Response(make_request())

        response.set_rerender_layout(1)
        assert response.get_rerender_layout() is True
        response.set_rerender_layout(0)
        assert response.get_rerender_layout() is False

    def test_get_cookie_by_name(self, make_request):
        response = Response(make_request())
        cookie = Cookie("foo", "bar")
        response.set_cookie(cookie)

        assert response.get_cookie("foo") is cookie
        assert response.get_cookie("missing") is None

    def test_cookie_set_is_created_once(self, make_request):
        response = Response(make_request())

        assert response.get_cookies() is response.get_cookies()

    def test_set_redirect_url_from_string_forces_ampersand_separator(self, make_request):
        response = Response(make_request())
        url = Url.from_path("list?a=1&b=2")
        url.get_params().set_separator(";")

        response._set_redirect_url(url)

        assert response._get_redirect_url() is url
        assert url.get_params().get_separator() == "&"

        response._set_redirect_url("dashboard?x=1")
        assert isinstance(response._get_redirect_url(), Url)
        assert response._get_redirect_url().get_path() == "dashboard"

    def test_get_request_falls_back_to_current_request(self, make_request, bound_request):
        request = bound_request(make_request())

        assert Response().get_request() is request

    def test_get_request_without_context_raises(self):
        with pytest.raises(NoRequestContextError):
            Response().get_request()


class TestPrepareXhr:
    """Test header emission for XHR requests."""

    def test_redirect_header_carries_encoded_absolute_url(self, make_request):
        response = Response(make_request(xhr=True))
        response._set_redirect_url("monitoring/list/hosts?state=1&sort=name")

        response.send_headers()

        header = response.get_header("X-Icinga-Redirect")
        assert header == "http%3A%2F%2Flocalhost%2Fmonitoring%2Flist%2Fhosts%3Fstate%3D1%26sort%3Dname"
        assert unquote(header) == "http://localhost/monitoring/list/hosts?state=1&sort=name"
        assert response.get_http_response_code() == 200
        assert not response.has_header("Location")

    def test_redirect_with_rerender_layout(self, make_request):
        response = Response(make_request(xhr=True))
        response._set_redirect_url("dashboard")
        response.set_rerender_layout()

        response.send_headers()

        assert response.get_header("X-Icinga-Rerender-Layout") == "yes"
        assert response.get_header("X-Icinga-Container") == "layout"

    def test_rerender_layout_without_redirect(self, make_request):
        response = Response(make_request(xhr=True))
        response.set_rerender_layout()

        response.send_headers()

        assert response.get_header("X-Icinga-Container") == "layout"
        assert not response.has_header("X-Icinga-Rerender-Layout")
        assert not response.has_header("X-Icinga-Redirect")

    def test_reload_css(self, make_request):
        response = Response(make_request(xhr=True))
        response.set_reload_css(True)

        response.send_headers()

        assert response.get_header("X-Icinga-Reload-Css") == "now"

    def test_reload_css_false_emits_nothing(self, make_request):
        response = Response(make_request(xhr=True))
        response.set_reload_css(False)

        response.send_headers()

        assert not response.has_header("X-Icinga-Reload-Css")

    @pytest.mark.parametrize("interval,expected", [(10, "10"), (0, "0")])
    def test_auto_refresh_interval(self, make_request, interval, expected):
        response = Response(make_request(xhr=True))
        response.set_auto_refresh_interval(interval)

        response.send_headers()

        assert response.get_header("X-Icinga-Refresh") == expected

    def test_no_instructions_no_headers(self, make_request):
        response = Response(make_request(xhr=True))

        response.send_headers()

        names = {header["name"] for header in response.get_headers()}
        assert names == {"Content-Type"}

    def test_instruction_headers_replace_existing(self, make_request):
        response = Response(make_request(xhr=True))
        response.set_header("X-Icinga-Refresh", "99")
        response.set_auto_refresh_interval(5)

        response.send_headers()

        values = [h["value"] for h in response.get_headers() if h["name"] == "X-Icinga-Refresh"]
        assert values == ["5"]


class TestPrepareFullPage:
    """Test header emission for regular browser requests."""

    def test_redirect_uses_location_and_302(self, make_request):
        response = Response(make_request())
        response._set_redirect_url("dashboard")

        response.send_headers()

        assert response.get_http_response_code() == 302
        assert response.is_redirect()
        assert response.get_header("Location") == "http://localhost/dashboard"
        assert not response.has_header("X-Icinga-Redirect")

    def test_redirect_respects_base_path(self, make_request):
        response = Response(make_request(base_path="/icingaweb2"))
        response._set_redirect_url("/icingaweb2/authentication/login")

        response.send_headers()

        assert response.get_header("Location") == "http://localhost/icingaweb2/authentication/login"

    def test_xhr_instructions_ignored(self, make_request):
        response = Response(make_request())
        response.set_rerender_layout().set_reload_css(True).set_auto_refresh_interval(10)

        response.send_headers()

        assert not any(h["name"].startswith("X-Icinga-") for h in response.get_headers())
        assert response.get_http_response_code() == 200

    def test_external_redirect(self, make_request):
        response = Response(make_request())
        response._set_redirect_url("https://icinga.com/docs")

        response.send_headers()

        assert response.get_header("Location") == "https://icinga.com/docs"


class TestContentType:
    """Test Content-Type emission."""

    def test_default_content_type(self, make_request):
        response = Response(make_request())

        response.send_headers()

        assert response.get_header("Content-Type") == "text/html"

    def test_custom_content_type(self, make_request):
        response = Response(make_request())
        response.set_content_type("text/csv")

        response.send_headers()

        assert response.get_header("Content-Type") == "text/csv"

    def test_explicit_header_is_not_replaced(self, make_request):
        response = Response(make_request())
        response.set_header("content-type", "application/pdf")

        response.send_headers()

        values = [h["value"] for h in response.get_headers() if h["name"] == "Content-Type"]
        assert values == ["application/pdf"]


class TestCookies:
    """Test cookie batching."""

    def test_cookies_sent_for_browser_requests(self, make_request):
        response = Response(make_request())
        response.set_cookie(Cookie("foo", "bar")).set_cookie(Cookie("baz", "qux"))

        rendered = response.send_response()

        set_cookies = rendered.headers.getlist("set-cookie")
        assert len(set_cookies) == 2
        assert any(value.startswith("foo=bar") for value in set_cookies)
        assert any(value.startswith("baz=qux") for value in set_cookies)

    def test_cookies_sent_for_xhr_requests(self, make_request):
        response = Response(make_request(xhr=True))
        response.set_cookie(Cookie("foo", "bar"))

        rendered = response.send_response()

        assert len(rendered.headers.getlist("set-cookie")) == 1

    def test_cookies_suppressed_for_api_requests(self, make_request):
        response = Response(make_request(api=True))
        response.set_cookie(Cookie("foo", "bar"))

        rendered = response.send_response()

        assert rendered.headers.getlist("set-cookie") == []

    def test_send_cookies_delegates_to_cookie_primitive(self, make_request):
        response = Response(make_request())
        response.set_cookie(Cookie("foo", "bar"))

        with patch.object(Cookie, "send") as mock_send:
            rendered = response.send_response()

        mock_send.assert_called_once_with(rendered)

    def test_cookie_attributes(self, make_request):
        response = Response(make_request())
        response.set_cookie(Cookie("foo", "bar", path="/icingaweb2", secure=True, http_only=True))

        header = response.send_response().headers["set-cookie"]

        assert "Path=/icingaweb2" in header
        assert "Secure" in header
        assert "HttpOnly" in header

    def test_unset_path_and_secure_follow_the_request(self, make_request):
        response = Response(make_request(scheme="https", port=443, base_path="/icingaweb2"))
        response.set_cookie(Cookie("icingaweb2-tzo", "3600-0"))

        header = response.send_response().headers["set-cookie"]

        assert "Path=/icingaweb2" in header
        assert "Secure" in header

    def test_explicit_path_and_secure_are_kept(self, make_request):
        response = Response(make_request(scheme="https", port=443, base_path="/icingaweb2"))
        response.set_cookie(Cookie("foo", "bar", path="/", secure=False))

        header = response.send_response().headers["set-cookie"]

        assert "Path=/;" in header
        assert "Secure" not in header


class TestSendHeaders:
    """Test the sending state."""

    def test_headers_cannot_change_after_send(self, make_request):
        response = Response(make_request())
        response.send_headers()

        with pytest.raises(HeadersAlreadySentError):
            response.set_header("X-Foo", "bar")

        with pytest.raises(HeadersAlreadySentError):
            response.send_headers()

    @pytest.mark.parametrize(
        "clear", ["clear_header", "clear_headers", "clear_raw_headers", "clear_all_headers"]
    )
    def test_headers_cannot_be_cleared_after_send(self, make_request, clear):
        response = Response(make_request())
        response.set_header("X-Foo", "bar")
        response.send_headers()

        args = ("X-Foo",) if clear == "clear_header" else ()
        with pytest.raises(HeadersAlreadySentError):
            getattr(response, clear)(*args)

        assert response.get_header("X-Foo") == "bar"

    def test_send_response_renders_body_and_status(self, make_request):
        response = Response(make_request())
        response.set_body("<p>hello</p>")
        response.set_http_response_code(201)

        rendered = response.send_response()

        assert rendered.status_code == 201
        assert rendered.body == b"<p>hello</p>"
        assert rendered.headers["content-type"] == "text/html"


class TestRedirectAndExit:
    """Test redirect_and_exit."""

    def test_raises_with_prepared_response(self, make_request, bound_session):
        response = Response(make_request())

        with pytest.raises(RedirectAndExit) as exc_info:
            response.redirect_and_exit("authentication/login")

        assert exc_info.value.response is response
        assert response.headers_sent
        assert response.get_http_response_code() == 302
        assert response.get_header("Location") == "http://localhost/authentication/login"

    def test_xhr_redirect(self, make_request, bound_session):
        response = Response(make_request(xhr=True))

        with pytest.raises(RedirectAndExit):
            response.redirect_and_exit(Url.from_path("dashboard"))

        assert response.get_http_response_code() == 200
        assert unquote(response.get_header("X-Icinga-Redirect")) == "http://localhost/dashboard"

    def test_redirect_url_without_request_gets_the_response_request(self, make_request):
        response = Response(make_request(xhr=True, host="monitoring.example.com", base_path="/icingaweb2"))
        url = Url.from_path("dashboard")

        response._set_redirect_url(url)
        response.prepare()

        assert url.get_request() is response.get_request()
        assert (
            unquote(response.get_header("X-Icinga-Redirect"))
            == "http://monitoring.example.com/icingaweb2/dashboard"
        )

    def test_changed_session_is_written(self, make_request, bound_session, session_store):
        bound_session.set("user", "icingaadmin")
        response = Response(make_request())

        with patch.object(bound_session, "write", wraps=bound_session.write) as mock_write:
            with pytest.raises(RedirectAndExit):
                response.redirect_and_exit("dashboard")

        mock_write.assert_called_once()
        assert session_store.load(bound_session.get_id()) == {"__default__": {"user": "icingaadmin"}}

    def test_unchanged_session_is_not_written(self, make_request, bound_session):
        response = Response(make_request())

        with patch.object(bound_session, "write") as mock_write:
            with pytest.raises(RedirectAndExit):
                response.redirect_and_exit("dashboard")

        mock_write.assert_not_called()

    def test_cookies_are_part_of_the_redirect(self, make_request, bound_session):
        response = Response(make_request())
        response.set_cookie(Cookie("remember", "me"))

        with pytest.raises(RedirectAndExit) as exc_info:
            response.redirect_and_exit("dashboard")

        rendered = exc_info.value.response.send_response()
        assert rendered.status_code == 302
        assert rendered.headers["location"] == "http://localhost/dashboard"
        assert rendered.headers["set-cookie"].startswith("remember=me")


class TestJson:
    """Test switching to a JSON response."""

    def test_json_copies_metadata(self, make_request):
        request = make_request()
        response = Response(request)
        response.set_header("X-Custom", "1")
        response.set_raw_header("X-Raw: 2")
        response.set_http_response_code(422)
        response.headers_sent_throws_exception = False

        json_response = response.json()

        assert isinstance(json_response, JsonResponse)
        assert json_response is not response
        assert json_response.get_header("X-Custom") == "1"
        assert json_response.get_raw_headers() == ["X-Raw: 2"]
        assert json_response.get_http_response_code() == 422
        assert json_response.headers_sent_throws_exception is False
        assert json_response.get_request() is request
        assert json_response.get_content_type() == "application/json"

    def test_json_headers_are_independent(self, make_request):
        response = Response(make_request())
        response.set_header("X-Custom", "1")

        json_response = response.json()
        json_response.set_header("X-Other", "2")

        assert not response.has_header("X-Other")
