"""Prompt construction for snippet and project reviews.

Cloud backends receive a single combined prompt from build_prompt(). Local
backends speak the chat-completion schema, so they get a short system framing
from build_system_prompt() and the code itself from build_user_message().
All functions here are pure.
"""

from __future__ import annotations

from revlens_core.models import Project, ProjectFile, ReviewInput, ReviewMode, Snippet

SNIPPET_SECTIONS = (
    "🐛 Potential Bugs & Errors",
    "⚡️ Performance & Optimization",
    "🎨 Readability & Best Practices",
    "🔒 Security Vulnerabilities",
    "✅ Summary & Overall Recommendation",
)

PROJECT_SECTIONS = (
    "🏛️ Architectural Overview",
    "🧩 Component & Module Analysis",
    "🎨 Consistency & Best Practices",
    "⚡️ Performance & Optimization",
    "🔒 Security Vulnerabilities",
    "✅ Summary & Next Steps",
)

_CLOSING = "Provide only the Markdown-formatted review. Do not include any conversational pleasantries."


def build_prompt(review_input: ReviewInput) -> str:
    if isinstance(review_input, Project):
        return _build_project_prompt(review_input.files, review_input.language)
    return _build_snippet_prompt(review_input.code, review_input.language)


def _build_snippet_prompt(code: str, language: str) -> str:
    return f"""You are an expert software engineer acting as an automated code review tool.
Your analysis must be rigorous, insightful, and constructive.

Please provide a detailed review of the following {language} code snippet.
Structure your feedback in Markdown format with the following sections:

### {SNIPPET_SECTIONS[0]}
Identify any logical flaws, off-by-one errors, race conditions, or unhandled edge cases.

### {SNIPPET_SECTIONS[1]}
Analyze for performance bottlenecks. Suggest improvements in algorithmic efficiency, memory usage, \
and resource management.

### {SNIPPET_SECTIONS[2]}
Evaluate against established best practices and style guides for {language}. Comment on naming, \
clarity, organization, and maintainability.

### {SNIPPET_SECTIONS[3]}
Scrutinize for common security risks (e.g., injection, XSS, insecure data handling).

### {SNIPPET_SECTIONS[4]}
Provide a brief summary and an overall recommendation (e.g., "Approved with minor suggestions," \
"Requires changes," "Major rework needed").

Here is the code to review:
```{language}
{code}
```

{_CLOSING}
"""


def _build_project_prompt(files: tuple[ProjectFile, ...], language: str) -> str:
    file_contents = serialize_files(files, separator="\n\n---\n\n")
    return f"""You are an expert software engineer tasked with a holistic code review of an entire project.
Your analysis must focus on overall architecture, code consistency, and inter-dependencies.

Please provide a detailed review of the following project, which is primarily written in {language}.
Structure your feedback in Markdown format with these sections:

### {PROJECT_SECTIONS[0]}
Analyze the overall project structure, design patterns, and separation of concerns. Identify any \
major architectural flaws or suggest improvements.

### {PROJECT_SECTIONS[1]}
Review the individual components/files for their role and effectiveness. Identify tightly coupled \
modules, potential circular dependencies, or code smells that span multiple files.

### {PROJECT_SECTIONS[2]}
Check for consistency in coding style, naming conventions, and error handling across the entire project.

### {PROJECT_SECTIONS[3]}
Identify any project-wide performance issues, such as inefficient data loading, redundant \
computations, or potential memory leaks.

### {PROJECT_SECTIONS[4]}
Look for security risks at the application level, such as improper handling of secrets, insecure \
API design, or lack of proper validation.

### {PROJECT_SECTIONS[5]}
Provide a high-level summary of your findings and suggest a prioritized list of next steps for \
improving the codebase.

Here is the entire project structure and content:
{file_contents}

{_CLOSING}
"""


def serialize_files(files: tuple[ProjectFile, ...] | list[ProjectFile], separator: str) -> str:
    """Render each file as its path followed by a fenced block, in input order."""
    return separator.join(f"File: `{f.path}`\n```\n{f.content}\n```" for f in files)


def build_system_prompt(mode: ReviewMode, language: str) -> str:
    if mode is ReviewMode.PROJECT:
        task = (
            f"Your task is to conduct a holistic code review of an entire project, primarily in {language}. "
            "Analyze architecture, consistency, and inter-dependencies."
        )
    else:
        task = f"Please provide a detailed review of the provided {language} code snippet."
    return f"""You are an expert software engineer acting as an automated code review tool.
Your analysis must be rigorous, insightful, and constructive.
{task}
Structure your feedback in Markdown format with appropriate sections \
(e.g., Architecture, Bugs, Performance, Readability, Security, Summary).
Provide only the Markdown-formatted review."""


def build_user_message(review_input: ReviewInput) -> str:
    if isinstance(review_input, Project):
        return "Here is the entire project to review:\n" + serialize_files(review_input.files, separator="\n---\n")
    snippet: Snippet = review_input
    return f"Here is the code to review:\n```{snippet.language}\n{snippet.code}\n```"
