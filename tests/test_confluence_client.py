import pytest
import requests
from unittest.mock import Mock

from req_analyzer.confluence_client import (
    ConfluenceClient,
    convert_storage_to_text,
    resolve_page_reference,
)
from req_analyzer.exceptions import ConfigError, FetchError
from req_analyzer.models import PageReference


def make_response(status_code=200, reason="OK", json_data=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.json.return_value = json_data
    response.text = text
    return response


class TestResolvePageReference:

    def test_resolves_url_with_at_prefix_and_slug(self):
        """Test the pasted-mention form with a title slug"""
        ref = resolve_page_reference("@acme.atlassian.net/wiki/spaces/PROJ/pages/123456/My+Page")
        assert ref == PageReference(space_key="PROJ", page_id="123456")

    def test_resolves_https_url(self):
        ref = resolve_page_reference("https://acme.atlassian.net/wiki/spaces/ENG/pages/98765")
        assert ref.space_key == "ENG"
        assert ref.page_id == "98765"

    def test_space_key_kept_verbatim(self):
        """Test that the space key is not case-folded"""
        ref = resolve_page_reference("https://acme.atlassian.net/wiki/spaces/~MixedCase/pages/42/x")
        assert ref.space_key == "~MixedCase"

    def test_only_one_leading_at_is_stripped(self):
        ref = resolve_page_reference("@@acme.atlassian.net/wiki/spaces/PROJ/pages/1")
        # The pattern is unanchored so the remaining @ does not matter
        assert ref.page_id == "1"

    @pytest.mark.parametrize("url", [
        "https://acme.atlassian.net/wiki/spaces/PROJ/overview",
        "https://acme.atlassian.net/wiki/spaces/PROJ/pages/abc/Title",
        "https://confluence.example.com/display/PROJ/Page",
        "",
    ])
    def test_non_matching_urls_return_none(self, url):
        assert resolve_page_reference(url) is None

    def test_page_reference_is_immutable(self):
        ref = resolve_page_reference("acme.atlassian.net/wiki/spaces/PROJ/pages/7")
        with pytest.raises(Exception):
            ref.page_id = "8"


class TestConvertStorageToText:

    def test_paragraphs_become_double_newlines(self):
        assert convert_storage_to_text("<p>One</p><p>Two</p>") == "One\n\nTwo"

    def test_line_breaks(self):
        assert convert_storage_to_text("a<br>b<br/>c<BR />d") == "a\nb\nc\nd"

    def test_headings_and_lists(self):
        raw = "<h2>Login</h2><ul><li>Must accept email</li><li>Should lock after 3 tries</li></ul>"
        assert convert_storage_to_text(raw) == (
            "Login\n\n• Must accept email\n• Should lock after 3 tries"
        )

    def test_remaining_tags_removed(self):
        raw = '<p><strong>The system</strong> <ac:link><ri:page ri:content-title="x"/></ac:link>must log in</p>'
        assert convert_storage_to_text(raw) == "The system must log in"

    def test_nbsp_replaced(self):
        assert convert_storage_to_text("<p>a&nbsp;b</p>") == "a b"

    def test_collapses_blank_line_runs(self):
        assert convert_storage_to_text("<p>a</p>\n \n<p></p>\n\n<p>b</p>") == "a\n\nb"

    def test_idempotent_on_clean_text(self):
        raw = "<h1>Title</h1><p>The system must log in</p><ul><li>item one</li></ul><p>x<br/>y</p>"
        once = convert_storage_to_text(raw)
        assert convert_storage_to_text(once) == once

    def test_malformed_markup_does_not_raise(self):
        assert convert_storage_to_text("<p>unclosed <b text") == "unclosed <b text"


class TestConfluenceClient:

    @pytest.fixture
    def confluence_client(self):
        return ConfluenceClient(
            domain="acme.atlassian.net",
            email="test@example.com",
            api_token="test-token"
        )

    def test_fetch_page_storage(self, confluence_client):
        confluence_client.session.get = Mock(return_value=make_response(
            json_data={'id': '123', 'body': {'storage': {'value': '<p>The system must log in</p>'}}}
        ))

        content = confluence_client.fetch_page_storage("123")

        assert content == '<p>The system must log in</p>'
        args, kwargs = confluence_client.session.get.call_args
        assert args[0] == "https://acme.atlassian.net/wiki/rest/api/content/123"
        assert kwargs['params'] == {'expand': 'body.storage,space,version'}
        assert kwargs['auth'] == ("test@example.com", "test-token")

    def test_json_headers_sent(self, confluence_client):
        assert confluence_client.session.headers['Accept'] == 'application/json'
        assert confluence_client.session.headers['Content-Type'] == 'application/json'

    def test_domain_scheme_is_stripped(self):
        client = ConfluenceClient("https://acme.atlassian.net/", "e@x.com", "t")
        assert client.base_url == "https://acme.atlassian.net/wiki"

    def test_missing_body_is_no_content_error(self, confluence_client):
        confluence_client.session.get = Mock(return_value=make_response(json_data={'id': '123'}))

        with pytest.raises(FetchError, match="No content found"):
            confluence_client.fetch_page_storage("123")

    def test_empty_body_is_no_content_error(self, confluence_client):
        confluence_client.session.get = Mock(return_value=make_response(
            json_data={'body': {'storage': {'value': ''}}}
        ))

        with pytest.raises(FetchError, match="No content found"):
            confluence_client.fetch_page_storage("123")

    def test_html_body_is_fetch_error(self, confluence_client):
        response = make_response(text="<html>Log in with SSO</html>")
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        confluence_client.session.get = Mock(return_value=response)

        with pytest.raises(FetchError, match="Invalid Confluence response"):
            confluence_client.fetch_page_storage("123")

    @pytest.mark.parametrize("json_data", [
        [],
        ["body"],
        {'body': None},
        {'body': {'storage': None}},
        {'body': {'storage': 'x'}},
        {'body': {'storage': {'value': 42}}},
    ])
    def test_unexpected_shape_is_no_content_error(self, confluence_client, json_data):
        confluence_client.session.get = Mock(return_value=make_response(json_data=json_data))

        with pytest.raises(FetchError, match="No content found"):
            confluence_client.fetch_page_storage("123")

    def test_error_status_includes_reason(self, confluence_client):
        confluence_client.session.get = Mock(return_value=make_response(
            status_code=401, reason="Unauthorized", text="bad credentials"
        ))

        with pytest.raises(FetchError, match="Confluence API error: Unauthorized"):
            confluence_client.fetch_page_storage("123")

    def test_transport_error_wrapped(self, confluence_client):
        confluence_client.session.get = Mock(side_effect=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(FetchError, match="refused"):
            confluence_client.fetch_page_storage("123")

    @pytest.mark.parametrize("kwargs", [
        dict(domain="", email="e@x.com", api_token="t"),
        dict(domain="acme.atlassian.net", email="", api_token="t"),
        dict(domain="acme.atlassian.net", email="e@x.com", api_token=""),
    ])
    def test_missing_credentials_is_config_error(self, kwargs):
        client = ConfluenceClient(**kwargs)
        client.session.get = Mock()

        with pytest.raises(ConfigError, match="credentials not configured"):
            client.fetch_page_storage("123")
        client.session.get.assert_not_called()

    def test_test_connection(self, confluence_client):
        confluence_client.session.get = Mock(return_value=make_response())
        assert confluence_client.test_connection() is True

        confluence_client.session.get = Mock(return_value=make_response(status_code=403, reason="Forbidden"))
        assert confluence_client.test_connection() is False
