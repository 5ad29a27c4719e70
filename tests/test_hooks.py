"""Tests for response filters, plugins and notices."""

from conftest import API_URL, FakeResponse
from stream_client.hooks import Plugin, ResponseFilters, identity_filter
from stream_client.logging import _redact_api_key
from stream_client.notices import CollectingNotifier, LogNotifier, transport_error_notice


class TestResponseFilters:
    def test_identity(self):
        assert identity_filter({"a": 1}, "http://x", {}) == {"a": 1}

    def test_priority_order(self):
        filters = ResponseFilters()
        filters.add(lambda data, url, args: data + ["late"], priority=20)
        filters.add(lambda data, url, args: data + ["early"], priority=5)
        filters.add(lambda data, url, args: data + ["default"])

        assert filters([], "http://x", {}) == ["early", "default", "late"]

    def test_equal_priority_keeps_insertion_order(self):
        filters = ResponseFilters()
        filters.add(lambda data, url, args: data + ["first"])
        filters.add(lambda data, url, args: data + ["second"])

        assert filters([], "http://x", {}) == ["first", "second"]

    def test_remove(self):
        filters = ResponseFilters()

        def shout(data, url, args):
            return data.upper()

        filters.add(shout)

        assert filters.remove(shout) is True
        assert filters.remove(shout) is False
        assert filters("quiet", "http://x", {}) == "quiet"


class TestClientFilters:
    def test_filter_receives_url_and_args(self, make_api):
        seen = {}

        def capture(data, url, args):
            seen.update(url=url, method=args["method"])
            return {**data, "filtered": True}

        api, _ = make_api(FakeResponse(200, {"a": 1}), response_filter=capture)

        assert api.validate_key() == {"a": 1, "filtered": True}
        assert seen == {"url": f"{API_URL}/validate-key", "method": "GET"}

    def test_filter_runs_before_error_check(self, make_api):
        def hide_errors(data, url, args):
            return {}

        api, _ = make_api(FakeResponse(400, {"error": "invalid"}), response_filter=hide_errors)

        assert api.validate_key() is False
        assert api.errors == {"http_code": 400}

    def test_plugin_registers_filter(self, make_api):
        class TagSource:
            def register(self, host):
                host.filters.add(self.tag)

            @staticmethod
            def tag(data, url, args):
                return {**data, "source": "stream"}

        api, _ = make_api(FakeResponse(200, {"id": 1}))
        plugin = TagSource()

        assert isinstance(plugin, Plugin)
        assert api.use(plugin) is api
        assert api.get_user(1) == {"id": 1, "source": "stream"}


class TestNotices:
    def test_transport_error_notice_text(self):
        assert transport_error_notice("timed out") == "Stream API Error. timed out."

    def test_collecting_notifier(self):
        notifier = CollectingNotifier()
        notifier.notify("one")
        notifier.notify("two", level="warning")

        assert notifier.notices == [("error", "one"), ("warning", "two")]
        notifier.clear()
        assert notifier.notices == []

    def test_log_notifier_does_not_raise(self):
        LogNotifier().notify("Stream API Error. boom.")


class TestLogRedaction:
    def test_master_key_masked(self):
        event = {"event": "api_request", "headers": {"stream-api-master-key": "secret"}}

        redacted = _redact_api_key(None, "info", event)

        assert redacted["headers"]["stream-api-master-key"] == "***"
