"""End-to-end workflow: inspect, name, branch, stage, commit, push."""

import logging
from typing import Optional

from rich.markup import escape

from .config import CLIOptions
from .errors import NotAGitRepositoryError
from .git import GitOperations, quote_message
from .providers import LLMProvider, create_provider
from .utils import GitChanges, console

LOG = logging.getLogger(__name__)


class GitAICommit:
    """Runs the workflow once for the resolved options.

    Dry-run mode performs every read-only step, including both provider
    calls, and only reports the commands that would change the repository.
    Nothing is rolled back when a later step fails.
    """

    def __init__(self, options: CLIOptions,
                 git: Optional[GitOperations] = None,
                 provider: Optional[LLMProvider] = None) -> None:
        self.options = options
        self.git = git or GitOperations(verbose=options.verbose)
        self.provider = provider or create_provider(options.provider)

    def log(self, message: str) -> None:
        console.print(message)

    def verbose(self, message: str) -> None:
        if self.options.verbose:
            console.print(f"[dim]\\[VERBOSE][/dim] {escape(message)}")

    def generate_unique_branch_name(self, changes: GitChanges) -> str:
        """Ask the provider for a name and suffix it until no branch has it.

        ``name``, ``name-1``, ``name-2``, ... are tried in order.
        """
        self.verbose("Generating branch name with LLM...")
        branch_name = self.provider.generate_branch_name(changes)

        candidate = branch_name
        suffix = 0
        while self.git.branch_exists(candidate):
            suffix += 1
            candidate = f"{branch_name}-{suffix}"
            self.verbose(f"Branch {branch_name} exists, trying {candidate}")
        return candidate

    def execute(self) -> bool:
        """Run the workflow.

        Returns:
            bool: False when there was nothing to commit, True otherwise.

        Raises:
            NotAGitRepositoryError: Outside a git work tree.
            GitCommandError: When a mutating git command fails.
        """
        dry_run = self.options.dry_run
        LOG.debug("Running workflow with %s", self.options)

        self.verbose("Checking if current directory is a git repository...")
        if not self.git.is_repository():
            raise NotAGitRepositoryError("Not inside a git repository")

        self.verbose("Inspecting current changes...")
        changes = self.git.get_changes()
        if not self.git.has_changes():
            self.log("No changes detected. Nothing to commit.")
            return False
        self.verbose(f"Found changes:\n{changes.status}\n")

        branch_name = self.generate_unique_branch_name(changes)
        self.log(f"\n📝 Generated branch name: [bold cyan]{escape(branch_name)}[/bold cyan]")

        if dry_run:
            self.log("\n[yellow]\\[DRY RUN][/yellow] Would execute:")
            self.log(f"  git checkout -b {escape(branch_name)}")
            self.log("  git add .")
        else:
            self.verbose("Creating new branch...")
            self.git.create_branch(branch_name)
            self.log(f"[green]✓[/green] Created and checked out branch: {escape(branch_name)}")

            self.verbose("Staging all changes...")
            self.git.stage_all()
            self.log("[green]✓[/green] Staged all changes")

        staged_diff = changes.diff if dry_run else self.git.get_staged_diff()

        self.verbose("Generating commit message with LLM...")
        commit_message = self.provider.generate_commit_message(staged_diff)
        self.log(f'\n💬 Generated commit message:\n  "{escape(commit_message)}"')

        if dry_run:
            self.log(f"  git commit -m {escape(quote_message(commit_message))}")
            self.log(f"  git push origin {escape(branch_name)}")
            self.log("\n[yellow]\\[DRY RUN][/yellow] No changes were made to the repository.")
            return True

        self.verbose("Creating commit...")
        self.git.commit(commit_message)
        self.log("[green]✓[/green] Created commit")

        self.verbose("Pushing to remote...")
        self.git.push(branch_name)
        self.log(f"[green]✓[/green] Pushed to origin/{escape(branch_name)}")

        self.log("\n✨ All done! Your changes have been committed and pushed.")
        return True
