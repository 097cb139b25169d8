"""
Unit tests for LLM provider utilities.

Uses a scripted provider; no API calls are made.
"""

import pytest

from jobsync.utils import llm
from jobsync.utils.llm import LLMProvider, LLMResponse, get_provider, parse_object_response


class FakeServerError(Exception):
    pass


class FakeRateLimitError(Exception):
    pass


class ScriptedProvider(LLMProvider):
    """Provider returning (or raising) scripted outcomes in order."""

    _provider_prefix = "fake"
    _retry_message = "fake overloaded"

    def __init__(self, outcomes, max_retries=3):
        self._retryable_exception = FakeServerError
        self._rate_limit_exception = FakeRateLimitError
        self.max_retries = max_retries
        self.outcomes = list(outcomes)
        self.calls = []
        self.update_model("fake-small")

    def _call_api(self, system_prompt, user_prompt, temperature, max_tokens):
        self.calls.append((system_prompt, user_prompt, temperature, max_tokens))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=self.model, input_tokens=1, output_tokens=2)


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr(llm.time, "sleep", lambda seconds: None)


@pytest.mark.unit
class TestParseObjectResponse:
    """Tests for parse_object_response function."""

    def test_plain_json(self):
        """Test a bare JSON object."""
        assert parse_object_response('{"inferredRole": "SRE"}') == {"inferredRole": "SRE"}

    def test_json_inside_prose_and_fences(self):
        """Test the outermost braces are used when text surrounds the object."""
        text = 'Here you go:\n```json\n{"a": {"b": 1}}\n```\nThanks'
        assert parse_object_response(text) == {"a": {"b": 1}}

    @pytest.mark.parametrize("text", ["", None, "no json here", "[1, 2]", "{broken", "} {"])
    def test_unparseable(self, text):
        """Test anything that is not an object gives {}."""
        assert parse_object_response(text) == {}


@pytest.mark.unit
class TestProviderGenerate:
    """Tests for LLMProvider.generate retry behavior."""

    def test_retries_server_errors(self, no_sleep):
        """Test retryable errors are retried until a response arrives."""
        provider = ScriptedProvider([FakeServerError(), FakeServerError(), "ok"])
        response = provider.generate("sys", "user", temperature=0.2, max_tokens=10)

        assert response.content == "ok"
        assert len(provider.calls) == 3
        assert provider.calls[0] == ("sys", "user", 0.2, 10)

    def test_gives_up_after_max_retries(self, no_sleep):
        """Test the last retryable error is re-raised."""
        provider = ScriptedProvider([FakeServerError()] * 3, max_retries=3)

        with pytest.raises(FakeServerError):
            provider.generate("sys", "user")
        assert len(provider.calls) == 3

    def test_rate_limit_not_retried(self, no_sleep):
        """Test rate limits surface immediately."""
        provider = ScriptedProvider([FakeRateLimitError("quota"), "unused"])

        with pytest.raises(FakeRateLimitError):
            provider.generate("sys", "user")
        assert len(provider.calls) == 1


@pytest.mark.unit
class TestRateLimitDetection:
    """Tests for LLMProvider.is_rate_limit_error."""

    def test_detection(self):
        """Test exception type, status code and message detection."""
        provider = ScriptedProvider([])
        status_error = RuntimeError("boom")
        status_error.status_code = 429

        assert provider.is_rate_limit_error(FakeRateLimitError())
        assert provider.is_rate_limit_error(status_error)
        assert provider.is_rate_limit_error(RuntimeError("HTTP 429 Too Many Requests"))
        assert not provider.is_rate_limit_error(RuntimeError("HTTP 500"))

    def test_update_model_refreshes_name(self):
        """Test the provider name follows the model."""
        provider = ScriptedProvider([])
        provider.update_model("fake-large")

        assert provider.name == "fake/fake-large"


@pytest.mark.unit
class TestGetProvider:
    """Tests for get_provider function."""

    def test_unknown_provider(self):
        """Test unknown names are rejected."""
        with pytest.raises(ValueError):
            get_provider("gemini")

    def test_missing_api_key(self, monkeypatch):
        """Test a missing key is reported before any request."""
        pytest.importorskip("openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            get_provider("openai")
