"""
Integration test for markdown round-trip stability.
Tests: ResumeDocument -> markdown -> ResumeDocument reproduces every field.

Covers:
- Identity header (title line survives sanitizing)
- Experience/education headers with and without location
- Multi-line descriptions as indented bullets
- Free-text sections, including pre-formatted skills
- Underscores inside emails
- Organizations with parentheses and empty contact fields
"""

import pytest

from jobsync.contexts.templating import (
    EducationItem,
    ExperienceItem,
    ProfileHeader,
    ResumeDocument,
    ResumeEditingSession,
    compose_resume_markdown,
    parse_resume_markdown,
    sanitize_markdown,
)

FULL_RESUME = ResumeDocument(
    profile=ProfileHeader(
        name="Jane Doe",
        title="Software Engineer",
        location="San Francisco",
        email="jane_doe@x.com",
        socials="linkedin.com/in/jane, github.com/jane",
    ),
    summary="Builds reliable systems.",
    experience=(
        ExperienceItem("Acme", "Engineer", "Jan 2022", "Present", "Remote", "Shipped X\nLed Y"),
        ExperienceItem("Globex", "Intern", "Jun 2020", "Aug 2021", None, ""),
    ),
    education=(
        EducationItem("State University", "B.S. Computer Science", "Sep 2016", "May 2020", "Boston", "GPA 3.9"),
    ),
    skills="- Python\n- SQL",
    certifications="- AWS Solutions Architect",
    projects="- Built a compiler",
    languages="- English\n- Spanish",
)


@pytest.mark.integration
def test_parse_compose_roundtrip():
    """Test parse(compose(M)) == M for a fully populated document."""
    markdown = compose_resume_markdown(FULL_RESUME)
    assert parse_resume_markdown(markdown) == FULL_RESUME


@pytest.mark.integration
def test_parse_sanitized_compose_roundtrip():
    """Test the sanitized canonical form parses back to the same document."""
    markdown = sanitize_markdown(compose_resume_markdown(FULL_RESUME))

    assert "jane_doe@x.com" in markdown
    assert parse_resume_markdown(markdown) == FULL_RESUME


@pytest.mark.integration
def test_compose_is_stable():
    """Test composing a reparsed document gives identical markdown."""
    markdown = sanitize_markdown(compose_resume_markdown(FULL_RESUME))
    again = sanitize_markdown(compose_resume_markdown(parse_resume_markdown(markdown)))

    assert again == markdown


@pytest.mark.integration
def test_roundtrip_organization_with_parentheses():
    """Test an organization carrying its own parentheses keeps its role and dates."""
    resume = ResumeDocument(
        profile=ProfileHeader(name="Jane Doe", title="Engineer", location="London", email="jane@x.com"),
        experience=(ExperienceItem("Acme (UK)", "Engineer", "Jan 2022", "Present", "London", "Shipped X"),),
        education=(EducationItem("Imperial College (London)", "MEng", "Sep 2015", "Jun 2019", None, ""),),
    )

    assert parse_resume_markdown(compose_resume_markdown(resume)) == resume


@pytest.mark.integration
def test_roundtrip_empty_contact_fields():
    """Test contact placeholders written for empty fields parse back as empty."""
    resume = ResumeDocument(profile=ProfileHeader(name="Jane Doe", title="Engineer", location="Berlin", socials="gh.com/j"))
    markdown = compose_resume_markdown(resume)

    assert "Berlin • [Email] • gh.com/j" in markdown
    assert parse_resume_markdown(markdown).profile == resume.profile


@pytest.mark.integration
def test_comma_skills_become_bullets():
    """Test single-line skills come back in bullet form."""
    resume = ResumeDocument(profile=ProfileHeader(name="Jane"), skills="Python, SQL")
    parsed = parse_resume_markdown(compose_resume_markdown(resume))

    assert parsed.skills == "- Python\n- SQL"


@pytest.mark.integration
def test_generated_to_edited_document():
    """Test a generated resume edited in a session keeps its other fields."""
    generated = (
        "# Jane Doe\n"
        "_**Software Engineer**_\n"
        "San Francisco • jane@x.com • linkedin.com/in/jane\n\n"
        "**Summary**\n"
        "Engineer (inferred) focused on data.\n\n"
        "**Experience**\n"
        "- Acme — Engineer (2022-01 – Present) — Remote\n"
        "  - Shipped X\n\n"
        "**Skills**\n"
        "  - Python\n"
        "  - SQL\n"
    )
    session = ResumeEditingSession.from_generated(generated)
    session.add_experience(ExperienceItem("Globex", "Intern", "Jun 2020", "Aug 2021"))
    saved = session.save()

    reparsed = parse_resume_markdown(saved)
    assert reparsed.profile == session.resume.profile
    assert reparsed.experience == session.resume.experience
    assert [item.company for item in reparsed.experience] == ["Acme", "Globex"]
    assert reparsed.summary == "Engineer focused on data."
