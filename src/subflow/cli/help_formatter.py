"""Custom Click help formatter for organized command display."""

import click

_SECTIONS = (
    ("Repository Operations", ("checkout", "pull", "add", "commit", "push", "status", "merge")),
    (
        "Branches and Tags",
        (
            "create-branch",
            "create-prefixed-branch",
            "create-tag",
            "start-branch",
            "start-feature",
            "start-hotfix",
            "start-release",
            "start-sprint",
        ),
    ),
    ("Commit Messages", ("generate-commit-message", "smart-commit")),
    ("Merge Conflicts", ("resolve-submodule-conflicts",)),
    ("Settings", ("status-report", "toggle-verbose", "toggle-dry-run")),
)


class GroupedCommandGroup(click.Group):
    """Click Group that organizes commands into sections in help output.

    Commands not listed in any section are shown under "Other".
    """

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Format commands into organized sections."""
        commands: dict[str, click.Command] = {}
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands[subcommand] = cmd

        if not commands:
            return

        listed: set[str] = set()
        for title, names in _SECTIONS:
            section = [(name, commands[name]) for name in names if name in commands]
            listed.update(names)
            if section:
                with formatter.section(title):
                    self._format_command_list(formatter, section)

        others = [(name, cmd) for name, cmd in commands.items() if name not in listed]
        if others:
            with formatter.section("Other"):
                self._format_command_list(formatter, others)

    def _format_command_list(
        self,
        formatter: click.HelpFormatter,
        commands: list[tuple[str, click.Command]],
    ) -> None:
        rows = []
        for name, cmd in commands:
            help_text = cmd.get_short_help_str(limit=formatter.width)
            rows.append((name, help_text))

        if rows:
            formatter.write_dl(rows)
