"""
Resume editing session.

Holds one generated resume while a user edits it. Generated text is parsed
once; when anything is recognized the session switches to edit mode and
every edit replaces a slice of an immutable ResumeDocument. save() composes
the document and caches the canonical markdown in the same call, so a
preview or export issued right after a save always sees the saved content.
"""

from dataclasses import fields, replace
from typing import Optional

from jobsync.contexts.templating.logger import _log_debug, _log_info
from jobsync.contexts.templating.markdown_composer import (
    compose_resume_markdown,
    normalize_dates_in_markdown,
    sanitize_markdown,
)
from jobsync.contexts.templating.markdown_parser import parse_resume_markdown
from jobsync.contexts.templating.resume_data_structure import (
    FREE_TEXT_SECTIONS,
    EducationItem,
    ExperienceItem,
    ProfileHeader,
    ResumeDocument,
)


class ResumeEditingSession:
    """
    Single-owner editing state for one resume.

    Attributes:
        raw_text: Text the session was created from
        resume: Current structured document
        edit_mode: Whether the document is being edited as fields
        last_saved_markdown: Canonical markdown from the most recent save
            (or the cleaned generated text right after creation)
    """

    def __init__(self, raw_text: str = "", resume: Optional[ResumeDocument] = None):
        self.raw_text = raw_text
        self.resume = resume or ResumeDocument()
        self.edit_mode = False
        self.last_saved_markdown = ""

    @classmethod
    def from_generated(cls, text: str) -> "ResumeEditingSession":
        """
        Start a session from generated markdown.

        Text with no recognizable structure stays read-only and is shown
        as-is.
        """
        session = cls(raw_text=text, resume=parse_resume_markdown(text))
        if session.resume.has_content():
            session.edit_mode = True
            session.last_saved_markdown = sanitize_markdown(normalize_dates_in_markdown(text))
            _log_info("Generated resume parsed, entering edit mode")
        else:
            _log_info("Nothing recognized in generated resume, keeping raw text")
        return session

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def update_profile(self, **changes) -> ProfileHeader:
        """Replace profile fields by name (name, title, location, email, socials)."""
        _check_field_names(ProfileHeader, changes)
        profile = replace(self.resume.profile, **changes)
        self.resume = replace(self.resume, profile=profile)
        return profile

    def update_section(self, name: str, text: str) -> None:
        """Replace one free-text section (summary, skills, certifications, projects, languages)."""
        if name not in FREE_TEXT_SECTIONS:
            raise KeyError(f"Unknown section: {name}")
        self.resume = replace(self.resume, **{name: text})

    def add_experience(self, item: Optional[ExperienceItem] = None) -> int:
        """Append an experience entry (blank by default) and return its index."""
        self.resume = self.resume.with_experience([*self.resume.experience, item or ExperienceItem()])
        return len(self.resume.experience) - 1

    def update_experience(self, index: int, **changes) -> ExperienceItem:
        _check_field_names(ExperienceItem, changes)
        items = list(self.resume.experience)
        index = _check_index(items, index)
        items[index] = replace(items[index], **changes)
        self.resume = self.resume.with_experience(items)
        return items[index]

    def remove_experience(self, index: int) -> ExperienceItem:
        items = list(self.resume.experience)
        removed = items.pop(_check_index(items, index))
        self.resume = self.resume.with_experience(items)
        return removed

    def add_education(self, item: Optional[EducationItem] = None) -> int:
        """Append an education entry (blank by default) and return its index."""
        self.resume = self.resume.with_education([*self.resume.education, item or EducationItem()])
        return len(self.resume.education) - 1

    def update_education(self, index: int, **changes) -> EducationItem:
        _check_field_names(EducationItem, changes)
        items = list(self.resume.education)
        index = _check_index(items, index)
        items[index] = replace(items[index], **changes)
        self.resume = self.resume.with_education(items)
        return items[index]

    def remove_education(self, index: int) -> EducationItem:
        items = list(self.resume.education)
        removed = items.pop(_check_index(items, index))
        self.resume = self.resume.with_education(items)
        return removed

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def save(self) -> str:
        """
        Compose, sanitize and cache the current document.

        Returns:
            The canonical markdown now stored in last_saved_markdown
        """
        self.last_saved_markdown = sanitize_markdown(compose_resume_markdown(self.resume))
        _log_debug(f"Saved resume markdown ({len(self.last_saved_markdown)} chars)")
        return self.last_saved_markdown

    def display_markdown(self) -> str:
        """Saved markdown in edit mode, the raw generated text otherwise."""
        if self.edit_mode:
            return self.last_saved_markdown
        return self.raw_text

    def export_markdown(self) -> str:
        """Markdown for export: the saved cache, else a fresh composition."""
        if not self.edit_mode:
            return self.raw_text
        return self.last_saved_markdown or sanitize_markdown(compose_resume_markdown(self.resume))

    def preview_html(self) -> str:
        # Imported here to keep templating importable without the rendering context
        from jobsync.contexts.rendering.html_renderer import render_markdown_to_html

        return render_markdown_to_html(self.display_markdown())

    def export_print_document(self, layout=None) -> str:
        """Standalone print-ready HTML for the export markdown."""
        from jobsync.contexts.rendering.print_document import render_print_document

        return render_print_document(self.export_markdown(), layout=layout)


def _check_index(items: list, index: int) -> int:
    """Validate an item index (negative indices are rejected)."""
    if not 0 <= index < len(items):
        raise IndexError(f"Item index {index} out of range (have {len(items)} items)")
    return index


def _check_field_names(cls, changes: dict) -> None:
    allowed = {f.name for f in fields(cls)}
    unknown = set(changes) - allowed
    if unknown:
        raise TypeError(f"Unknown {cls.__name__} fields: {', '.join(sorted(unknown))}")
