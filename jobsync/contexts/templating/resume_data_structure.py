"""
Resume Document Structure

Defines the structured, field-level representation of a resume that editing
operates on. This structure is the interface between the parser (generated
markdown -> fields), the composer (fields -> canonical markdown) and the
editing session.

The model is always present but may be empty: parsing never fails, it only
produces a sparser document. Callers branch on has_content() instead of
catching errors.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from jobsync.contexts.templating.exceptions import InvalidResumeStructureError

# Free-text sections, in canonical document order
FREE_TEXT_SECTIONS = ("summary", "skills", "certifications", "projects", "languages")


@dataclass(frozen=True)
class ProfileHeader:
    """
    Identity header of a resume.

    Attributes:
        name: Full name from the "# " line
        title: Professional title from the emphasis-wrapped line
        location: First non-email token of the contact line
        email: First contact token containing "@"
        socials: Remaining contact tokens joined with ", "
    """

    name: str = ""
    title: str = ""
    location: str = ""
    email: str = ""
    socials: str = ""

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True)
class ExperienceItem:
    """
    Single work experience entry.

    Attributes:
        company: Employer name
        position: Role held
        from_date: Canonical start date ("Mon YYYY", a year, or "")
        to_date: Canonical end date ("Mon YYYY", "Present", or "")
        location: Optional location
        description: Bullet texts joined with newlines
    """

    company: str = ""
    position: str = ""
    from_date: str = ""
    to_date: str = ""
    location: Optional[str] = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "position": self.position,
            "from": self.from_date,
            "to": self.to_date,
            "location": self.location,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExperienceItem":
        return cls(
            company=data.get("company") or "",
            position=data.get("position") or "",
            from_date=data.get("from") or "",
            to_date=data.get("to") or "",
            location=data.get("location") or None,
            description=data.get("description") or "",
        )


@dataclass(frozen=True)
class EducationItem:
    """
    Single education entry.

    Attributes:
        institution: School or university
        field_of_study: Degree or field
        from_date: Canonical start date
        to_date: Canonical end date
        location: Optional location
        description: Notes (GPA, honors) joined with newlines
    """

    institution: str = ""
    field_of_study: str = ""
    from_date: str = ""
    to_date: str = ""
    location: Optional[str] = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "institution": self.institution,
            "field_of_study": self.field_of_study,
            "from": self.from_date,
            "to": self.to_date,
            "location": self.location,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EducationItem":
        return cls(
            institution=data.get("institution") or "",
            field_of_study=data.get("field_of_study") or "",
            from_date=data.get("from") or "",
            to_date=data.get("to") or "",
            location=data.get("location") or None,
            description=data.get("description") or "",
        )


@dataclass(frozen=True)
class ResumeDocument:
    """
    Structured representation of a complete resume.

    Item lists are tuples so every edit produces a new document via
    dataclasses.replace() rather than mutating shared state.

    Attributes:
        profile: Identity header
        summary: Free-text summary paragraph
        experience: Experience entries in document order
        education: Education entries in document order
        skills: Skills body (bullets or comma-separated)
        certifications: Certifications body
        projects: Projects or achievements body
        languages: Languages body
    """

    profile: ProfileHeader = field(default_factory=ProfileHeader)
    summary: str = ""
    experience: tuple = ()
    education: tuple = ()
    skills: str = ""
    certifications: str = ""
    projects: str = ""
    languages: str = ""

    def has_content(self) -> bool:
        """
        Whether parsing recognized anything usable.

        An all-default document means the source text had no recognizable
        structure and should be shown raw instead of in an editor.
        """
        if not self.profile.is_empty():
            return True
        if self.experience or self.education:
            return True
        return any(getattr(self, name).strip() for name in FREE_TEXT_SECTIONS)

    def with_experience(self, items: List[ExperienceItem]) -> "ResumeDocument":
        return replace(self, experience=tuple(items))

    def with_education(self, items: List[EducationItem]) -> "ResumeDocument":
        return replace(self, education=tuple(items))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a YAML-friendly dict under a top-level "resume" key.
        """
        data = {
            "profile": {f.name: getattr(self.profile, f.name) for f in fields(self.profile)},
            "summary": self.summary,
            "experience": [item.to_dict() for item in self.experience],
            "education": [item.to_dict() for item in self.education],
        }
        for name in FREE_TEXT_SECTIONS[1:]:
            data[name] = getattr(self, name)
        return {"resume": data}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResumeDocument":
        """
        Build from the dict produced by to_dict().

        Raises:
            InvalidResumeStructureError: If the "resume" key is missing or
                item lists are malformed
        """
        if not isinstance(data, dict) or "resume" not in data:
            raise InvalidResumeStructureError("Structured resume must contain 'resume' key at root level")

        resume = data["resume"] or {}
        profile = resume.get("profile") or {}
        experience = resume.get("experience") or []
        education = resume.get("education") or []

        if not isinstance(experience, list) or not isinstance(education, list):
            raise InvalidResumeStructureError("'experience' and 'education' must be lists")
        if not all(isinstance(item, dict) for item in experience + education):
            raise InvalidResumeStructureError("Experience and education entries must be mappings")

        return cls(
            profile=ProfileHeader(**{
                f.name: profile.get(f.name) or "" for f in fields(ProfileHeader)
            }),
            summary=resume.get("summary") or "",
            experience=tuple(ExperienceItem.from_dict(item) for item in experience),
            education=tuple(EducationItem.from_dict(item) for item in education),
            skills=resume.get("skills") or "",
            certifications=resume.get("certifications") or "",
            projects=resume.get("projects") or "",
            languages=resume.get("languages") or "",
        )
