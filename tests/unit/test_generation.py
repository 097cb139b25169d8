"""
Unit tests for resume and cover letter generation.

Uses a scripted provider keyed by model name; no API calls are made.
"""

import json
import math

import pytest

from jobsync.contexts.intake import (
    CoverLetterRequest,
    EmptyGenerationError,
    GenerationError,
    MissingFieldError,
    RateLimitExceededError,
    clamp_creativity,
    generate_cover_letter,
    generate_resume_markdown,
)
from jobsync.contexts.intake import generation
from jobsync.contexts.intake.generation import (
    default_models,
    generate_with_fallback,
    parse_requirement_extraction,
)
from jobsync.utils.llm import LLMProvider, LLMResponse


class FakeRateLimitError(Exception):
    pass


class FakeServerError(Exception):
    pass


class FakeProvider(LLMProvider):
    """
    Provider whose answers are scripted per model.

    Each model maps to a list of outcomes consumed in order: a string is
    returned as content, an exception is raised.
    """

    _provider_prefix = "fake"
    _retry_message = "fake overloaded"

    def __init__(self, script):
        self._retryable_exception = FakeServerError
        self._rate_limit_exception = FakeRateLimitError
        self.max_retries = 1
        self.script = {model: list(outcomes) for model, outcomes in script.items()}
        self.calls = []
        self.update_model(next(iter(script), "fake-default"))

    def _call_api(self, system_prompt, user_prompt, temperature, max_tokens):
        self.calls.append(
            {
                "model": self.model,
                "system": system_prompt,
                "user": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        outcome = self.script[self.model].pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=self.model, input_tokens=10, output_tokens=5)


RESUME_MARKDOWN = "# Jane Doe\n_**Data Engineer**_\nRemote • jane@x.com\n"

EXTRACTION_JSON = json.dumps(
    {
        "inferredRole": "Data Engineer",
        "keyRequirements": ["Airflow", "SQL"],
        "mapping": [{"requirement": "SQL", "evidence": "5 years of Postgres"}],
    }
)


def make_request(**overrides):
    values = dict(
        job_description="We need a data engineer with Airflow and SQL.",
        job_title="Data Engineer",
        skills=["Python", "SQL"],
        name="Jane Doe",
    )
    values.update(overrides)
    return CoverLetterRequest(**values)


@pytest.mark.unit
class TestClampCreativity:
    """Tests for clamp_creativity function."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.5, 0.5),
            (1.7, 1.0),
            (-2, 0.0),
            ("0.8", 0.8),
            ("high", 0.35),
            (None, 0.35),
            (math.nan, 0.35),
        ],
    )
    def test_clamp(self, value, expected):
        """Test clamping and fallback to the default."""
        assert clamp_creativity(value) == expected


@pytest.mark.unit
class TestGenerateWithFallback:
    """Tests for generate_with_fallback function."""

    def test_first_model_answers(self):
        """Test the first model's content is returned trimmed."""
        provider = FakeProvider({"small": ["  hello \n"], "large": ["unused"]})
        result = generate_with_fallback(provider, "sys", "user", 0.4, ["small", "large"])

        assert result.content == "hello"
        assert result.model == "small"
        assert [call["model"] for call in provider.calls] == ["small"]

    def test_rate_limited_model_falls_through(self):
        """Test a rate-limited model hands over to the next."""
        provider = FakeProvider({"small": [FakeRateLimitError("429")], "large": ["hello"]})
        result = generate_with_fallback(provider, "sys", "user", 0.4, ["small", "large"])

        assert result.model == "large"
        assert [call["model"] for call in provider.calls] == ["small", "large"]

    def test_empty_content_falls_through(self):
        """Test blank content hands over to the next model."""
        provider = FakeProvider({"small": ["   "], "large": ["hello"]})
        assert generate_with_fallback(provider, "s", "u", 0.4, ["small", "large"]).model == "large"

    def test_all_rate_limited(self):
        """Test every model rate limited raises RateLimitExceededError."""
        error = FakeRateLimitError("quota")
        provider = FakeProvider({"small": [error], "large": [FakeRateLimitError()]})

        with pytest.raises(RateLimitExceededError) as excinfo:
            generate_with_fallback(provider, "s", "u", 0.4, ["small", "large"])
        assert excinfo.value.models == ["small", "large"]
        assert isinstance(excinfo.value.original_error, FakeRateLimitError)

    def test_all_empty(self):
        """Test every model empty raises EmptyGenerationError."""
        provider = FakeProvider({"small": [""], "large": [""]})

        with pytest.raises(EmptyGenerationError):
            generate_with_fallback(provider, "s", "u", 0.4, ["small", "large"])

    def test_other_error_stops(self):
        """Test a non rate-limit failure does not try further models."""
        provider = FakeProvider({"small": [RuntimeError("bad request")], "large": ["unused"]})

        with pytest.raises(GenerationError, match="bad request") as excinfo:
            generate_with_fallback(provider, "s", "u", 0.4, ["small", "large"])
        assert excinfo.value.model == "fake/small"
        assert len(provider.calls) == 1


@pytest.mark.unit
class TestDefaultModels:
    """Tests for default_models function."""

    def test_env_override(self, monkeypatch):
        """Test LLM_MODELS overrides the built-in chain."""
        monkeypatch.setenv("LLM_MODELS", "a, b,,c")
        assert default_models(FakeProvider({"x": []})) == ["a", "b", "c"]

    def test_unknown_prefix_uses_current_model(self, monkeypatch):
        """Test providers without a fallback chain use their own model."""
        monkeypatch.delenv("LLM_MODELS", raising=False)
        assert default_models(FakeProvider({"only": []})) == ["only"]

    def test_known_prefix(self, monkeypatch):
        """Test the built-in chain for a known provider."""
        monkeypatch.delenv("LLM_MODELS", raising=False)
        provider = FakeProvider({"x": []})
        provider._provider_prefix = "openai"

        assert default_models(provider) == generation.FALLBACK_MODELS["openai"]


@pytest.mark.unit
class TestGenerateResumeMarkdown:
    """Tests for generate_resume_markdown function."""

    def test_generates_markdown(self):
        """Test the prompt carries the job description and the result is returned."""
        provider = FakeProvider({"small": [RESUME_MARKDOWN]})
        result = generate_resume_markdown("Airflow and SQL", provider=provider, models=["small"])

        assert result.content == RESUME_MARKDOWN.strip()
        assert result.input_tokens == 10
        assert "Airflow and SQL" in provider.calls[0]["user"]
        assert provider.calls[0]["temperature"] == generation.RESUME_TEMPERATURE

    def test_long_job_description_trimmed(self):
        """Test the job description is cut before prompting."""
        provider = FakeProvider({"small": [RESUME_MARKDOWN]})
        generate_resume_markdown("x" * 7000, provider=provider, models=["small"])

        assert "x" * 6000 + "..." in provider.calls[0]["user"]
        assert "x" * 6001 not in provider.calls[0]["user"]

    @pytest.mark.parametrize("job_description", ["", "   ", None])
    def test_empty_job_description(self, job_description, monkeypatch):
        """Test validation happens before any provider is created."""
        monkeypatch.setattr(generation, "get_provider", pytest.fail)

        with pytest.raises(MissingFieldError) as excinfo:
            generate_resume_markdown(job_description)
        assert excinfo.value.fields == ["job_description"]


@pytest.mark.unit
class TestGenerateCoverLetter:
    """Tests for generate_cover_letter function."""

    def test_two_passes(self):
        """Test extraction feeds the letter prompt and token counts add up."""
        provider = FakeProvider({"small": [EXTRACTION_JSON, "Dear Hiring Team, ..."]})
        request = make_request(creativity=0.9, company="Acme", email="jane@x.com")
        result = generate_cover_letter(request, provider=provider, models=["small"])

        extraction_call, letter_call = provider.calls
        assert result.content == "Dear Hiring Team, ..."
        assert result.input_tokens == 20
        assert result.output_tokens == 10
        assert extraction_call["temperature"] == generation.EXTRACTION_TEMPERATURE
        assert "Job Title (user-provided): Data Engineer" in extraction_call["user"]
        assert "Skills: Python, SQL" in extraction_call["user"]
        assert letter_call["temperature"] == 0.9
        assert "Inferred Role: Data Engineer" in letter_call["user"]
        assert "- SQL: 5 years of Postgres" in letter_call["user"]
        assert "Recipient (To):" in letter_call["user"]
        assert "Company: Acme" in letter_call["user"]
        assert "Email: jane@x.com" in letter_call["user"]

    def test_unparseable_extraction_uses_defaults(self):
        """Test a prose extraction answer falls back to the job title and generic guidance."""
        provider = FakeProvider({"small": ["I think they want a data person.", "Letter"]})
        generate_cover_letter(make_request(), provider=provider, models=["small"])
        letter_prompt = provider.calls[1]["user"]

        assert "Inferred Role: Data Engineer" in letter_prompt
        assert "Relevant qualifications from the JD" in letter_prompt
        assert "Map the candidate's skills and experience" in letter_prompt
        assert "Recipient (To):" not in letter_prompt

    def test_default_creativity(self):
        """Test an invalid creativity falls back to the default temperature."""
        provider = FakeProvider({"small": [EXTRACTION_JSON, "Letter"]})
        generate_cover_letter(make_request(creativity="wild"), provider=provider, models=["small"])

        assert provider.calls[1]["temperature"] == generation.DEFAULT_CREATIVITY

    def test_missing_fields(self, monkeypatch):
        """Test all missing required fields are reported together."""
        monkeypatch.setattr(generation, "get_provider", pytest.fail)
        request = make_request(job_description=" ", skills=[])

        with pytest.raises(MissingFieldError) as excinfo:
            generate_cover_letter(request)
        assert excinfo.value.fields == ["job_description", "skills"]
        assert str(excinfo.value) == "Missing required fields: job_description, skills."

    def test_rate_limit_on_letter_pass(self):
        """Test a rate limit in the second pass surfaces as RateLimitExceededError."""
        provider = FakeProvider({"small": [EXTRACTION_JSON, FakeRateLimitError("429")]})

        with pytest.raises(RateLimitExceededError):
            generate_cover_letter(make_request(), provider=provider, models=["small"])


@pytest.mark.unit
class TestCoverLetterRequest:
    """Tests for CoverLetterRequest helpers."""

    def test_safe_name_fallbacks(self):
        """Test name, then sender name, then "Candidate"."""
        assert make_request(name="Jane").safe_name() == "Jane"
        assert make_request(name="", from_first_name="Ann", from_last_name="Lee").safe_name() == "Ann Lee"
        assert make_request(name="  ").safe_name() == "Candidate"

    def test_skills_text(self):
        """Test list and string skills."""
        assert make_request(skills=["Go", "k8s"]).skills_text() == "Go, k8s"
        assert make_request(skills="Go, k8s").skills_text() == "Go, k8s"


@pytest.mark.unit
class TestParseRequirementExtraction:
    """Tests for parse_requirement_extraction function."""

    def test_full_answer(self):
        """Test all fields are read."""
        extraction = parse_requirement_extraction(EXTRACTION_JSON, "Engineer")

        assert extraction.inferred_role == "Data Engineer"
        assert extraction.key_requirements == ["Airflow", "SQL"]
        assert extraction.mapping == [("SQL", "5 years of Postgres")]

    def test_malformed_parts_ignored(self):
        """Test wrong types fall back to defaults."""
        text = '{"inferredRole": 3, "keyRequirements": "SQL", "mapping": ["x", {"requirement": "Go"}]}'
        extraction = parse_requirement_extraction(text, "Engineer")

        assert extraction.inferred_role == "Engineer"
        assert extraction.key_requirements == []
        assert extraction.mapping == [("Go", "")]
