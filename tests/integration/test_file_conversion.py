"""
Integration test for file-level markdown <-> YAML conversion.
Tests: convert_resume() and validate_roundtrip_conversion() on real files.

Covers:
- Markdown -> YAML with roundtrip validation and artifact cleanup
- YAML -> markdown with roundtrip validation
- Overwrite protection and unsupported inputs
- Failure keeps artifacts for debugging
"""

import pytest
from omegaconf import OmegaConf

from jobsync.contexts.templating import (
    EducationItem,
    ExperienceItem,
    ProfileHeader,
    ResumeDocument,
    compose_resume_markdown,
    convert_resume,
    markdown_to_yaml,
    validate_roundtrip_conversion,
    yaml_to_markdown,
)
from jobsync.contexts.templating import converter
from jobsync.contexts.templating.exceptions import InvalidResumeStructureError

RESUME = ResumeDocument(
    profile=ProfileHeader("Jane Doe", "Software Engineer", "San Francisco", "jane@x.com", "github.com/jane"),
    summary="Builds reliable systems.",
    experience=(ExperienceItem("Acme", "Engineer", "Jan 2022", "Present", "Remote", "Shipped X"),),
    education=(EducationItem("MIT", "Physics", "Sep 2016", "May 2020", None, ""),),
    skills="- Python\n- SQL",
)

GENERATED = """\
# Jane Doe
_**Software Engineer**_
San Francisco • jane@x.com • github.com/jane

**Summary**
Builds reliable systems.

**Experience**
- Acme — Engineer (2022-01 – Present) — Remote
  - Shipped X

**Education**
- MIT — Physics (2016-09 – 2020-05)

**Skills**
- Python
- SQL

**Languages (optional)**
"""


@pytest.fixture
def logs_path(tmp_path, monkeypatch):
    path = tmp_path / "logs"
    monkeypatch.setattr(converter, "LOGS_PATH", path)
    return path


@pytest.mark.integration
def test_markdown_to_yaml_file(tmp_path):
    """Test generated markdown is cleaned, parsed and saved as YAML."""
    md_path = tmp_path / "generated.md"
    yaml_path = tmp_path / "generated.yaml"
    md_path.write_text(GENERATED, encoding="utf-8")

    data = markdown_to_yaml(md_path, yaml_path)

    assert ResumeDocument.from_dict(data) == RESUME
    saved = OmegaConf.to_container(OmegaConf.load(yaml_path))
    assert saved == data
    assert yaml_path.read_text(encoding="utf-8").endswith("\n")
    assert not yaml_path.read_text(encoding="utf-8").endswith("\n\n")


@pytest.mark.integration
def test_yaml_to_markdown_file(tmp_path):
    """Test YAML composes to sanitized canonical markdown."""
    yaml_path = tmp_path / "resume.yaml"
    OmegaConf.save(OmegaConf.create(RESUME.to_dict()), yaml_path)

    markdown = yaml_to_markdown(yaml_path, tmp_path / "resume.md")

    assert markdown.startswith("# Jane Doe\n**Software Engineer**  \n")
    assert "- Acme — Engineer (Jan 2022 - Present) — Remote\n  - Shipped X" in markdown
    assert (tmp_path / "resume.md").read_text(encoding="utf-8") == markdown


@pytest.mark.integration
def test_yaml_without_resume_key(tmp_path):
    """Test YAML that is not a structured resume is rejected."""
    yaml_path = tmp_path / "other.yaml"
    yaml_path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(InvalidResumeStructureError):
        yaml_to_markdown(yaml_path)


@pytest.mark.integration
def test_roundtrip_validation_from_markdown(tmp_path):
    """Test canonical markdown validates with zero diffs and keeps its intermediates."""
    md_path = tmp_path / "resume.md"
    md_path.write_text(compose_resume_markdown(RESUME), encoding="utf-8")
    work_dir = tmp_path / "work"

    result = validate_roundtrip_conversion(md_path, work_dir, max_markdown_diffs=0, max_yaml_diffs=0)

    assert result["error"] is None
    assert result["validation_passed"]
    assert result["markdown_roundtrip"]["num_diffs"] == 0
    assert result["yaml_roundtrip"]["num_diffs"] == 0
    for name in ["resume_cleaned.md", "resume_parsed.yaml", "resume_composed.md", "resume_reparsed.yaml"]:
        assert (work_dir / name).exists()


@pytest.mark.integration
def test_roundtrip_validation_counts_markdown_diffs(tmp_path):
    """Test lines the composer rewrites are counted and written to a diff file."""
    md_path = tmp_path / "generated.md"
    md_path.write_text(GENERATED, encoding="utf-8")
    work_dir = tmp_path / "work"

    result = validate_roundtrip_conversion(md_path, work_dir, max_markdown_diffs=0, max_yaml_diffs=0)

    # The empty Languages heading is dropped by the composer
    assert result["markdown_roundtrip"]["num_diffs"] > 0
    assert not result["markdown_roundtrip"]["success"]
    assert result["yaml_roundtrip"]["num_diffs"] == 0
    assert not result["validation_passed"]
    assert (work_dir / "markdown_roundtrip.diff").exists()


@pytest.mark.integration
def test_roundtrip_validation_unsupported_type(tmp_path):
    """Test other file types are reported, not raised."""
    path = tmp_path / "resume.txt"
    path.write_text("# Jane", encoding="utf-8")

    result = validate_roundtrip_conversion(path, tmp_path / "work", 6, 0)

    assert not result["validation_passed"]
    assert "Unsupported file type" in result["error"]


@pytest.mark.integration
def test_convert_markdown_to_yaml(tmp_path, logs_path):
    """Test a successful parse places the YAML and keeps only the log."""
    md_path = tmp_path / "generated.md"
    md_path.write_text(GENERATED, encoding="utf-8")
    output_dir = tmp_path / "out"

    result = convert_resume(md_path, output_dir=output_dir)

    assert result.success, result.error
    assert result.output_path == output_dir / "generated.yaml"
    assert ResumeDocument.from_dict(OmegaConf.to_container(OmegaConf.load(result.output_path))) == RESUME
    assert result.log_dir.parent == logs_path
    assert [path.name for path in result.log_dir.iterdir()] == ["template.log"]


@pytest.mark.integration
def test_convert_yaml_to_markdown(tmp_path, logs_path):
    """Test a successful compose places the markdown next to the input."""
    yaml_path = tmp_path / "resume.yaml"
    OmegaConf.save(OmegaConf.create(RESUME.to_dict()), yaml_path)

    result = convert_resume(yaml_path)

    assert result.success, result.error
    assert result.output_path == tmp_path / "resume.md"
    assert result.yaml_diffs == 0
    assert result.markdown_diffs == 0


@pytest.mark.integration
def test_convert_failure_keeps_artifacts(tmp_path, logs_path):
    """Test a failed validation leaves intermediates in the log directory."""
    md_path = tmp_path / "generated.md"
    md_path.write_text(GENERATED, encoding="utf-8")

    result = convert_resume(md_path, output_dir=tmp_path / "out", max_markdown_diffs=0)

    assert not result.success
    assert result.output_path is None
    assert result.error == "Roundtrip validation failed"
    assert (result.log_dir / "generated_parsed.yaml").exists()
    assert not (tmp_path / "out" / "generated.yaml").exists()


@pytest.mark.integration
def test_convert_refuses_overwrite(tmp_path, logs_path):
    """Test allow_overwrite=False protects an existing output."""
    md_path = tmp_path / "generated.md"
    md_path.write_text(GENERATED, encoding="utf-8")
    (tmp_path / "generated.yaml").write_text("keep: me\n", encoding="utf-8")

    with pytest.raises(ValueError, match="already exists"):
        convert_resume(md_path, allow_overwrite=False)
    assert (tmp_path / "generated.yaml").read_text(encoding="utf-8") == "keep: me\n"


@pytest.mark.integration
def test_convert_unsupported_type(tmp_path, logs_path):
    """Test unsupported inputs raise before anything is written."""
    path = tmp_path / "resume.txt"
    path.write_text("# Jane", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported file type"):
        convert_resume(path)
    assert not logs_path.exists()
