"""Command-line interface for git-scribe."""

import logging
import re
from pathlib import Path
from typing import NoReturn

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, Prompt
from rich.table import Table

from git_scribe.ai import AIClient, PromptLibrary
from git_scribe.ai.factory import PROVIDERS, supported_providers
from git_scribe.clipboard import clipboard_info, copy_to_clipboard
from git_scribe.config import (
    SUPPORTED_LANGUAGES,
    AppConfig,
    CommitStyleConfig,
    Config,
    DirectoryConfig,
    ProviderConfig,
    mask_api_key,
)
from git_scribe.errors import ClipboardError, ConfigError, GitError, GitScribeError
from git_scribe.git_ops import GitOperations
from git_scribe.templates import (
    DEFAULT_TEMPLATE_NAME,
    create_default_template,
    list_templates,
    load_template,
)

app = typer.Typer(
    name="git-scribe",
    help="AI-written commit messages, pull request descriptions and code reviews",
    no_args_is_help=True,
)

console = Console()

BRANCH_PREFIXES = ("feature/", "feat/", "fix/", "bugfix/", "hotfix/")
RECENT_COMMIT_COUNT = 3


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def generate_pr_title(branch: str) -> str:
    """Derive a PR title from a branch name.

    ``feature/add-user_login`` becomes ``add user login``.
    """
    title = branch
    for prefix in BRANCH_PREFIXES:
        if title.startswith(prefix):
            title = title[len(prefix) :]
            break
    return re.sub(r"[-_]", " ", title).strip()


def _fail(error: GitScribeError) -> NoReturn:
    print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


def _load_app_config() -> AppConfig:
    """Load configuration and make sure an API key is set."""
    config = Config()
    app_config = config.load()
    if not app_config.ai.api_key:
        raise ConfigError(
            f"AI API key not configured in {config.config_file}, "
            "run 'git-scribe init' or set GIT_SCRIBE_API_KEY",
            component="cli",
        )
    return app_config


def _open_repository() -> GitOperations:
    git = GitOperations()
    if not git.is_git_repository():
        raise GitError("not a git repository")
    return git


def _resolve_base_branch(git: GitOperations, base: str | None) -> str:
    base_branch = base or git.get_default_base_branch()
    if not git.branch_exists(base_branch):
        raise GitError(f"base branch '{base_branch}' does not exist")
    return base_branch


def _commit_context(git: GitOperations) -> list[str]:
    """Branch name and recent commit summaries for the commit prompt."""
    context = []
    branch = git.get_current_branch()
    if branch:
        context.append(f"Current branch: {branch}")

    # A repository without commits has no log yet
    try:
        recent = git.get_recent_commits(RECENT_COMMIT_COUNT)
    except GitError:
        recent = []
    if recent:
        context.append(f"Recent commits: {'; '.join(recent)}")
    return context


@app.command()
def version() -> None:
    """Show the version and exit."""
    from git_scribe import __version__

    print(f"git-scribe {__version__}")


@app.command()
def commit(
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Commit without asking for confirmation"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show detailed progress and debug logging"
    ),
) -> None:
    """Generate a commit message for the staged changes and commit them."""
    _setup_logging(verbose)

    try:
        app_config = _load_app_config()
        git = _open_repository()
        diff = git.get_staged_diff()
        context = _commit_context(git)

        if verbose:
            console.print(
                f"[dim]Provider: {app_config.ai.provider}, model: {app_config.ai.model}, "
                f"style: {app_config.commit.describe()}[/dim]"
            )
            console.print(f"[dim]Staged diff: {len(diff.splitlines())} lines[/dim]")
            for line in context:
                console.print(f"[dim]{line}[/dim]")

        with AIClient(app_config) as client:
            with console.status("[cyan]Generating commit message..."):
                message = client.generate_commit_message(diff, context)

        console.print(
            Panel(
                escape(message),
                title="✨ Generated commit message",
                border_style="green",
            )
        )

        if not yes and not Confirm.ask("Commit with this message?", default=True):
            print("[yellow]Commit cancelled[/yellow]")
            return

        git.commit(message)
        print("[green]✓[/green] Changes committed")

    except GitScribeError as e:
        _fail(e)
    except KeyboardInterrupt:
        print("\n[yellow]Cancelled by user[/yellow]")
        raise typer.Exit(130)


@app.command()
def draft(
    base: str | None = typer.Option(
        None, "--base", "-b", help="Base branch (defaults to main, master or production)"
    ),
    template: str = typer.Option(
        DEFAULT_TEMPLATE_NAME, "--template", "-t", help="Template name or file path"
    ),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Write the description to a markdown file"
    ),
    title: str | None = typer.Option(
        None, "--title", "-T", help="PR title (defaults to one derived from the branch)"
    ),
    clipboard: bool = typer.Option(
        False, "--clipboard", "-c", help="Copy the description to the clipboard"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging"
    ),
) -> None:
    """Draft a pull request description for the current branch."""
    _setup_logging(verbose)

    try:
        app_config = _load_app_config()
        git = _open_repository()

        current_branch = git.get_current_branch()
        base_branch = _resolve_base_branch(git, base)
        if current_branch == base_branch:
            raise GitError(
                f"current branch is the base branch '{base_branch}', "
                "switch to a feature branch first"
            )

        pr_title = title or generate_pr_title(current_branch)
        template_text = load_template(template, app_config.directories.templates)

        diff = git.get_diff_between_branches(base_branch, current_branch)
        commits = git.get_commits_between_branches(base_branch, current_branch)
        stats = git.get_diff_stats_between_branches(base_branch, current_branch)

        print(
            f"[cyan]Drafting PR for [bold]{escape(current_branch)}[/bold] "
            f"against [bold]{escape(base_branch)}[/bold] ({len(commits)} commits)[/cyan]"
        )

        with AIClient(app_config) as client:
            with console.status("[cyan]Generating PR description..."):
                description = client.generate_pr_description_with_template(
                    pr_title, commits, diff, stats, template_text
                )

        console.print(Panel(f"[bold]{escape(pr_title)}[/bold]", title="📝 PR title"))
        console.print(Markdown(description))

        pr_content = f"# {pr_title}\n\n{description}"

        if output:
            output_path = Path(output)
            output_path.write_text(f"{pr_content}\n", encoding="utf-8")
            print(f"[green]✓[/green] PR description saved to {output_path}")

        if clipboard:
            try:
                tool = copy_to_clipboard(pr_content)
                print(f"[green]✓[/green] PR description copied to clipboard ({tool})")
            except ClipboardError as e:
                print(f"[yellow]Warning: {escape(str(e))}[/yellow]")
                print(f"[yellow]Clipboard support: {escape(clipboard_info())}[/yellow]")

    except GitScribeError as e:
        _fail(e)
    except OSError as e:
        print(f"[red]Error writing output file: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        print("\n[yellow]Cancelled by user[/yellow]")
        raise typer.Exit(130)


@app.command()
def review(
    base: str | None = typer.Option(
        None, "--base", "-b", help="Base branch (defaults to main, master or production)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging"
    ),
) -> None:
    """Review the changes of the current branch."""
    _setup_logging(verbose)

    try:
        app_config = _load_app_config()
        git = _open_repository()

        current_branch = git.get_current_branch()
        base_branch = _resolve_base_branch(git, base)
        diff = git.get_diff_between_branches(base_branch, current_branch)

        with AIClient(app_config) as client:
            with console.status("[cyan]Reviewing changes..."):
                result = client.generate_pr_review(diff)

        console.print(
            Panel.fit(
                f"[bold]{escape(current_branch)}[/bold] → [bold]{escape(base_branch)}[/bold]",
                title="🔍 Code review",
            )
        )
        console.print(Markdown(result))

    except GitScribeError as e:
        _fail(e)
    except KeyboardInterrupt:
        print("\n[yellow]Cancelled by user[/yellow]")
        raise typer.Exit(130)


def _ask_api_key(provider_name: str) -> str:
    """Prompt until the key passes the provider's format check."""
    provider_class = PROVIDERS[provider_name]
    while True:
        api_key = Prompt.ask(
            f"[cyan]Enter your {provider_name.title()} API key", password=True
        ).strip()
        if not api_key:
            print("[red]API key cannot be empty[/red]")
            continue
        try:
            provider_class.validate_config(api_key, provider_class.get_default_model())
        except ConfigError as e:
            print(f"[red]{e.message}[/red]")
            continue
        return api_key


def _ask_temperature() -> float:
    while True:
        temperature = FloatPrompt.ask("[cyan]Temperature (0.0 - 1.0)", default=0.7)
        if 0.0 <= temperature <= 1.0:
            return temperature
        print("[red]Temperature must be between 0.0 and 1.0[/red]")


@app.command()
def init() -> None:
    """Set up git-scribe (interactive wizard)."""
    config = Config()

    print("[bold cyan]git-scribe setup[/bold cyan]")
    print()

    if config.exists():
        print(f"[green]✓[/green] A configuration already exists at {config.config_file}")
        if not Confirm.ask("Would you like to replace it?"):
            return

    try:
        provider_name = Prompt.ask(
            "[cyan]AI provider", choices=supported_providers(), default="openai"
        )
        api_key = _ask_api_key(provider_name)
        model = Prompt.ask(
            "[cyan]Model",
            default=PROVIDERS[provider_name].get_default_model(),
        )
        temperature = _ask_temperature()

        conventional = Confirm.ask("[cyan]Use Conventional Commits?", default=True)
        emoji = Confirm.ask("[cyan]Add emojis to commit messages?", default=False)
        language = Prompt.ask(
            "[cyan]Commit message language",
            choices=SUPPORTED_LANGUAGES,
            default="english",
        )

        defaults = DirectoryConfig()
        prompts_dir = Prompt.ask("[cyan]Prompts directory", default=defaults.prompts)
        templates_dir = Prompt.ask(
            "[cyan]Templates directory", default=defaults.templates
        )

        app_config = AppConfig(
            ai=ProviderConfig(
                provider=provider_name,
                api_key=api_key,
                model=model,
                temperature=temperature,
            ),
            commit=CommitStyleConfig(
                conventional=conventional, emoji=emoji, language=language
            ),
            directories=DirectoryConfig(prompts=prompts_dir, templates=templates_dir),
        )

        for path in PromptLibrary(app_config.directories, app_config.prompts).seed():
            print(f"[green]✓[/green] Wrote prompt {path}")

        template_path = create_default_template(app_config.directories.templates)
        print(f"[green]✓[/green] Default PR template at {template_path}")

        saved = config.save(app_config)
        print(f"[green]✓[/green] Configuration saved to {saved}")
        print()
        print("Next steps:")
        print("  git add <files> && [bold]git-scribe commit[/bold]")
        print("  [bold]git-scribe draft[/bold] to write a PR description")
        print("  [bold]git-scribe review[/bold] to review your branch")

    except GitScribeError as e:
        _fail(e)
    except OSError as e:
        print(f"[red]Error writing files: {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        print("\n[yellow]Setup cancelled by user[/yellow]")
        raise typer.Exit(130)


@app.command("config")
def show_config() -> None:
    """Show the current configuration."""
    config = Config()
    try:
        app_config = config.load()
    except GitScribeError as e:
        _fail(e)

    info = config.get_config_info()

    table = Table(title="git-scribe configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Config File", info["config_file"])
    table.add_row("Config Exists", "✓ Yes" if info["config_exists"] else "✗ No")
    if info["config_exists"]:
        table.add_row("File Permissions", info["config_file_permissions"] or "unknown")

    table.add_row("Provider", app_config.ai.provider)
    table.add_row(
        "API Key",
        mask_api_key(app_config.ai.api_key) if app_config.ai.api_key else "✗ Not set",
    )
    table.add_row("Model", app_config.ai.model)
    table.add_row("Temperature", str(app_config.ai.temperature))
    table.add_row("Max Tokens", str(app_config.ai.max_tokens))
    table.add_row("Commit Style", app_config.commit.describe())
    table.add_row("Language", app_config.commit.language)
    table.add_row("Prompts Directory", app_config.directories.prompts)
    table.add_row("Templates Directory", app_config.directories.templates)
    table.add_row("Clipboard", clipboard_info())

    print(table)

    if not info["config_exists"]:
        print()
        print(
            "[yellow]No configuration file found. Run [bold]git-scribe init[/bold] to create one.[/yellow]"
        )


@app.command("templates")
def show_templates(
    create_default: bool = typer.Option(
        False, "--create-default", help="Create templates/default.md if missing"
    ),
) -> None:
    """List the available PR templates."""
    try:
        app_config = Config().load()
    except GitScribeError as e:
        _fail(e)

    templates_dir = app_config.directories.templates

    if create_default:
        path = create_default_template(templates_dir)
        print(f"[green]✓[/green] Default template at {path}")

    names = list_templates(templates_dir)
    if not names:
        print(f"[yellow]No templates found in {templates_dir}[/yellow]")
        print("[dim]The built-in default template is used for 'git-scribe draft'[/dim]")
        return

    console.print("\n[bold]Available PR templates:[/bold]\n")
    for name in names:
        console.print(f"  • {name}")
    console.print(
        "\n[dim]💡 Use a template with: [yellow]git-scribe draft --template <name>[/yellow][/dim]"
    )


if __name__ == "__main__":
    app()
