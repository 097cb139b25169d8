"""
Unit tests for ResumeEditingSession.
"""

import pytest

from jobsync.contexts.templating.resume_data_structure import (
    EducationItem,
    ExperienceItem,
)
from jobsync.contexts.templating.session import ResumeEditingSession

GENERATED = """\
# Jane Doe
_**Software Engineer**_
San Francisco • jane@x.com • linkedin.com/in/jane

**Experience**
- Acme — Engineer (2022-01 – Present) — Remote
  - Shipped X

**Languages (optional)**
- English (Native)
"""


@pytest.mark.unit
class TestFromGenerated:
    """Tests for ResumeEditingSession.from_generated."""

    def test_recognized_text_enters_edit_mode(self):
        """Test parsed text switches to edit mode with cleaned markdown cached."""
        session = ResumeEditingSession.from_generated(GENERATED)

        assert session.edit_mode
        assert session.resume.profile.name == "Jane Doe"
        assert "(Jan 2022 - Present)" in session.last_saved_markdown
        assert "**Languages**" in session.last_saved_markdown
        assert "_**" not in session.last_saved_markdown
        assert session.display_markdown() == session.last_saved_markdown

    def test_unrecognized_text_stays_raw(self):
        """Test free prose stays read-only and is shown unchanged."""
        text = "Sorry, I cannot help with that request."
        session = ResumeEditingSession.from_generated(text)

        assert not session.edit_mode
        assert session.display_markdown() == text
        assert session.export_markdown() == text


@pytest.mark.unit
class TestEdits:
    """Tests for field-level edits."""

    def test_update_profile(self):
        """Test profile fields are replaced by name."""
        session = ResumeEditingSession.from_generated(GENERATED)
        session.update_profile(title="Staff Engineer")

        assert session.resume.profile.title == "Staff Engineer"
        assert session.resume.profile.name == "Jane Doe"

    def test_update_profile_unknown_field(self):
        """Test unknown profile fields are rejected."""
        session = ResumeEditingSession()
        with pytest.raises(TypeError):
            session.update_profile(phone="123")

    def test_update_section(self):
        """Test free-text sections."""
        session = ResumeEditingSession()
        session.update_section("skills", "Python, SQL")

        assert session.resume.skills == "Python, SQL"
        with pytest.raises(KeyError):
            session.update_section("experience", "nope")

    def test_experience_add_update_remove(self):
        """Test the experience item lifecycle."""
        session = ResumeEditingSession()
        first = session.add_experience()
        second = session.add_experience(ExperienceItem(company="Globex"))
        session.update_experience(first, company="Acme", to_date="Present")

        assert (first, second) == (0, 1)
        assert session.resume.experience[0] == ExperienceItem(company="Acme", to_date="Present")

        removed = session.remove_experience(0)
        assert removed.company == "Acme"
        assert [item.company for item in session.resume.experience] == ["Globex"]

    def test_education_add_update_remove(self):
        """Test the education item lifecycle."""
        session = ResumeEditingSession()
        index = session.add_education(EducationItem(institution="MIT"))
        updated = session.update_education(index, field_of_study="Physics")

        assert updated == EducationItem(institution="MIT", field_of_study="Physics")
        session.remove_education(index)
        assert session.resume.education == ()

    @pytest.mark.parametrize("index", [1, -1])
    def test_bad_index(self, index):
        """Test out-of-range and negative indices raise IndexError."""
        session = ResumeEditingSession()
        session.add_experience()

        with pytest.raises(IndexError):
            session.update_experience(index, company="X")
        with pytest.raises(IndexError):
            session.remove_experience(index)
        with pytest.raises(IndexError):
            session.remove_education(0)

    def test_edits_replace_document(self):
        """Test an edit produces a new document instead of mutating the old one."""
        session = ResumeEditingSession.from_generated(GENERATED)
        before = session.resume
        session.update_experience(0, description="Shipped Y")

        assert before.experience[0].description == "Shipped X"
        assert session.resume is not before


@pytest.mark.unit
class TestSaveAndExport:
    """Tests for save, display and export."""

    def test_save_updates_cache_immediately(self):
        """Test an export right after save sees the saved edit."""
        session = ResumeEditingSession.from_generated(GENERATED)
        session.update_section("summary", "Builds reliable systems.")
        saved = session.save()

        assert session.last_saved_markdown == saved
        assert session.export_markdown() == saved
        assert "**Summary**\nBuilds reliable systems." in session.export_markdown()

    def test_save_is_sanitized(self):
        """Test saved markdown has no emphasis underscores."""
        session = ResumeEditingSession.from_generated(GENERATED)
        saved = session.save()

        assert saved.startswith("# Jane Doe\n**Software Engineer**  \n")

    def test_export_without_save_composes(self):
        """Test an edit-mode session with an empty cache composes on export."""
        session = ResumeEditingSession()
        session.edit_mode = True
        session.update_profile(name="Jane")

        assert session.export_markdown().startswith("# Jane\n")

    def test_preview_html(self):
        """Test the preview renders the displayed markdown."""
        session = ResumeEditingSession.from_generated(GENERATED)
        html = session.preview_html()

        assert "<h1>Jane Doe</h1>" in html
        assert "<li>Shipped X</li>" in html

    def test_export_print_document(self):
        """Test the print export is a full HTML page."""
        session = ResumeEditingSession.from_generated(GENERATED)
        document = session.export_print_document(layout={"document": {"auto_print": False}})

        assert document.lstrip().startswith("<!doctype html>")
        assert "<h1>Jane Doe</h1>" in document
        assert "window.print()" not in document
