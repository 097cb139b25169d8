"""
JobSync - job-description-driven resume and cover letter generation

Turns a pasted job description into a generated cover letter or resume, lets the
resume be edited as structured fields, and exports it as a print-ready document.

Architecture:
- Intake Context: Job description intake and text generation
- Templating Context: Resume markdown <-> structured model round-trip and editing
- Rendering Context: Markdown to print/preview markup and print documents
"""

__version__ = "0.1.0"
