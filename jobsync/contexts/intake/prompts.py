"""
Prompt builders for resume and cover letter generation.

The resume prompt fixes the markdown shape the templating parser expects
(name line, emphasized title, bullet-separated contacts, bold section
headings, "Company — Position (dates) — Location" items). Changing the
output format block here means changing the parser too.
"""

from typing import List, Sequence, Tuple

# Input limits (characters)
DEFAULT_TRIM = 6000
SHORT_FIELD_TRIM = 200
SKILLS_TRIM = 1000
EXPERIENCE_TRIM = 2000

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

RESUME_SYSTEM_PROMPT = "You are an expert resume writer."

_RESUME_PROMPT_TEMPLATE = """\
You are an expert resume writer.

Task: Based ONLY on the following Job Description (JD), infer the target role/title and generate a compact, ATS-friendly one-page resume in clean Markdown. Extract required skills and responsibilities from the JD. Where specific candidate data is missing, create reasonable placeholders that are generic and role-appropriate (no personal PII). Keep the tone professional and concise.

Important formatting requirements (must follow exactly):
  - Use Markdown with headings and bolded section titles. Do NOT output plain text. Do NOT wrap in code fences.
  - Section headings must be bolded (e.g., **Summary**, **Experience**, etc.) and/or use markdown heading syntax.
  - Use bullet points for lists except the Summary, which may be a short paragraph.
  - Keep content printable and compact for PDF.

Job Description (verbatim):
\"\"\"
{job_description}
\"\"\"

Output format (strictly in Markdown, in this structure and order):

# [FULL NAME]
_**[Inferred Role / Title]**_
[City, Country] • [Email placeholder] • [LinkedIn placeholder]

**Summary**
A short paragraph (2–4 sentences) aligned to the JD.

**Experience**
- Company — Position (YYYY-MM – YYYY-MM) — Location
  - One bullet per line describing impact aligned to the JD
  - Keep to 2–4 bullets per role
- Company — Position (YYYY-MM – YYYY-MM)
  - Bullets

**Education**
- Institution — Field of Study (YYYY-MM – YYYY-MM) — Location
  - Optional short note (GPA, honors) if reasonable

**Skills**
- Concise list of hard skills extracted from the JD.

**Certifications (optional)**
- Add only if clearly implied by the JD.

**Projects or Achievements (optional)**
- 1–2 impactful items mapped to the JD.

**Languages (optional)**
- 1–2 examples as placeholders.

Rules:
  - Infer the target role/title directly from the JD. Prioritize JD requirements.
  - Do not invent unrealistic claims; be professional and generic when uncertain.
  - Keep to a single printable page.
  - No tables. No code fences. Markdown only with bolded section titles.
"""

EXTRACTION_SYSTEM_PROMPT = (
    "You are an expert career coach. Analyze the Job Description (JD) and extract the key requirements."
)

_EXTRACTION_PROMPT_TEMPLATE = """\
You are an expert career coach. Analyze the Job Description (JD) and extract the key requirements.
If the provided jobTitle conflicts with the JD, follow the JD.
Return a compact JSON with this exact shape (no extra commentary):
{{
  "inferredRole": string,
  "keyRequirements": string[],
  "mapping": {{ "requirement": string, "evidence": string }}[]
}}


Job Description (JD):
{job_description}


Candidate Info:
{candidate_info}"""

COVER_LETTER_SYSTEM_PROMPT = "You are an expert cover letter writer."

_COVER_LETTER_PROMPT_TEMPLATE = """\
Write a professional, tailored cover letter strictly aligned with the JD requirements.
- If the user-provided jobTitle contradicts the JD, follow the JD.
- Use the inferred role and mapping below.
- Keep it concise (300–500 words), well-structured, and confident.
- Include a brief closing paragraph and a sign-off with the applicant's name.
- Explicitly reference 3–5 of the most important JD requirements.
- Creativity guidance (0–1): {creativity}. Use more varied phrasing at higher values; stay precise at lower values.
- Avoid hallucinations.
- Personalization: If recipient info is provided, address the letter using that data (e.g., 'Dear <First> <Last>' or 'Hiring Team' if missing). Mention company and department when relevant.
- Signature: Include sender contact details (email and phone) when provided.


Job Description (authoritative):
{job_description}

Inferred Role: {inferred_role}

Key Requirements:
- {key_requirements}

Candidate Mapping (requirement -> evidence):
{mapping}

Candidate Info:
{candidate_info}"""

DEFAULT_KEY_REQUIREMENT = "Relevant qualifications from the JD"
DEFAULT_MAPPING_LINE = "- Map the candidate's skills and experience to the JD requirements explicitly."


# =============================================================================
# BUILDERS
# =============================================================================


def trim(text: str, limit: int = DEFAULT_TRIM) -> str:
    """
    Cut text longer than limit and mark the cut with "...".

    Example:
        >>> trim("abcdef", 3)
        'abc...'
    """
    text = text or ""
    return text[:limit] + "..." if len(text) > limit else text


def build_resume_prompt(job_description: str) -> str:
    """User prompt asking for a one-page markdown resume for the given JD."""
    return _RESUME_PROMPT_TEMPLATE.format(job_description=job_description)


def format_candidate_info(
    name: str,
    skills: str,
    experience: str,
    job_title: str = None,
) -> str:
    """Candidate block shared by both cover letter passes (job title only in the first)."""
    lines = [f"Name: {trim(name, SHORT_FIELD_TRIM)}"]
    if job_title is not None:
        lines.append(f"Job Title (user-provided): {trim(job_title, SHORT_FIELD_TRIM)}")
    lines.append(f"Skills: {trim(skills, SKILLS_TRIM)}")
    lines.append(f"Experience Summary: {trim(experience, EXPERIENCE_TRIM)}")
    return "\n".join(lines)


def format_contact_block(heading: str, fields: Sequence[Tuple[str, str]]) -> str:
    """
    Labeled contact block, or "" when every value is empty.

    Example:
        >>> format_contact_block("Sender (From)", [("Email", "a@b.c"), ("Phone", "")])
        'Sender (From):\\nEmail: a@b.c\\nPhone: '
    """
    if not any(value for _, value in fields):
        return ""
    lines = [f"{heading}:"]
    lines.extend(f"{label}: {trim(value or '', SHORT_FIELD_TRIM)}" for label, value in fields)
    return "\n".join(lines)


def build_extraction_prompt(
    job_description: str,
    name: str,
    job_title: str,
    skills: str,
    experience: str,
) -> str:
    """First cover letter pass: requirement extraction as JSON."""
    return _EXTRACTION_PROMPT_TEMPLATE.format(
        job_description=job_description,
        candidate_info=format_candidate_info(name, skills, experience, job_title=job_title),
    )


def build_cover_letter_prompt(
    job_description: str,
    inferred_role: str,
    key_requirements: List[str],
    mapping: List[Tuple[str, str]],
    creativity: float,
    candidate_info: str,
    sender_block: str = "",
    recipient_block: str = "",
) -> str:
    """Second cover letter pass: the letter itself."""
    mapping_text = (
        "\n".join(f"- {requirement}: {evidence}" for requirement, evidence in mapping)
        if mapping
        else DEFAULT_MAPPING_LINE
    )
    requirements = key_requirements or [DEFAULT_KEY_REQUIREMENT]
    info = "\n".join(block for block in (candidate_info, sender_block, recipient_block) if block)

    return _COVER_LETTER_PROMPT_TEMPLATE.format(
        creativity=creativity,
        job_description=job_description,
        inferred_role=inferred_role,
        key_requirements="\n- ".join(requirements),
        mapping=mapping_text,
        candidate_info=info,
    )
