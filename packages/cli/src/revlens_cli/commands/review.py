"""review command — run an AI review on a snippet, file, or project folder."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markdown import Markdown

from revlens_core.config import provider_config, upload_rules
from revlens_core.errors import ReviewError
from revlens_core.models import SUPPORTED_LANGUAGES, Project, ProviderId, Snippet, guess_language
from revlens_core.session import ReviewSession
from revlens_core.utils.files import collect_project_files

console = Console()

SAMPLE_CODE_SNIPPET = """// This function has a few issues for the AI to find.
function processNumbers(data) {
  var largest = 0; // Bug: Fails for lists of only negative numbers.
  var sum = "0";   // Bug: Should be a number, not a string.

  // Inefficiently finds the largest number in a nested loop.
  for (var i = 0; i < data.length; i++) {
    for (var j = 0; j < data.length; j++) {
      if (data[j] > largest) {
        largest = data[j];
      }
    }
    sum = sum + data[i]; // Performance: String concatenation in a loop is slow.
  }

  // 'var' is outdated; 'let' or 'const' should be used.
  console.log("The largest number is: " + largest);
  console.log("The sum is: " + sum);

  return { largest, sum };
}"""


def _build_input(source, project_dir: str | None, sample: bool, language: str | None, config: dict):
    """Turn the mutually exclusive input options into a ReviewInput."""
    given = [source is not None, bool(project_dir), sample]
    if given.count(True) != 1:
        raise click.UsageError("Provide exactly one of FILE (or '-' for stdin), --project or --sample.")

    if sample:
        return Snippet(code=SAMPLE_CODE_SNIPPET, language="javascript")

    if project_dir:
        files = collect_project_files(project_dir, upload_rules(config))
        console.print(f"[dim]Collected {len(files)} file(s) from {project_dir}.[/dim]")
        return Project(files=files, language=language or config["language"])

    name = getattr(source, "name", "-")
    detected = guess_language(name) if name not in ("-", "<stdin>") else None
    return Snippet(code=source.read(), language=language or detected or config["language"])


@click.command("review")
@click.argument("source", type=click.File("r"), required=False)
@click.option(
    "--project",
    "project_dir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=None,
    help="Review every allowed file in this folder as one project.",
)
@click.option("--sample", is_flag=True, help="Review a built-in JavaScript sample with known issues.")
@click.option(
    "--language",
    "-l",
    type=click.Choice(list(SUPPORTED_LANGUAGES)),
    default=None,
    help="Language of the code. Guessed from the file extension when omitted.",
)
@click.option(
    "--provider",
    "-p",
    type=click.Choice([p.value for p in ProviderId]),
    default=None,
    help="AI provider. Overrides config file.",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Also write the raw Markdown review to this file.",
)
@click.pass_context
def review_cmd(
    ctx,
    source,
    project_dir: str | None,
    sample: bool,
    language: str | None,
    provider: str | None,
    output_path: str | None,
):
    """Review code with Gemini, Ollama or LM Studio and print Markdown feedback.

    \b
    Examples:
      revlens review app.py
      cat snippet.js | revlens review - --language javascript
      revlens review --project ./my-app --provider ollama
    """
    config = ctx.obj["config"]
    provider = provider or config["provider"]
    if provider not in {p.value for p in ProviderId}:
        raise click.UsageError(f"Unknown provider {provider!r}. Choose one of: gemini, ollama, lmstudio.")
    review_input = _build_input(source, project_dir, sample, language, config)

    session = ReviewSession()
    with console.status(f"Reviewing with {ProviderId(provider).display_name}..."):
        try:
            feedback = session.submit(review_input, provider, provider_config(config))
        except ReviewError:
            console.print(f"[red]{session.error}[/red]")
            ctx.exit(1)

    console.print(Markdown(feedback))
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(feedback)
        console.print(f"[green]Review written to {output_path}[/green]")
