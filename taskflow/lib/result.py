"""Command results and their plain-text rendering."""

from dataclasses import dataclass, field


@dataclass
class CommandResult:
    """What a command did, ready to print."""
    success: bool
    output: str = ""
    next_steps: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


def success(output: str, next_steps: list[str] | None = None, warnings: list[str] | None = None) -> CommandResult:
    return CommandResult(
        success=True,
        output=output,
        next_steps=list(next_steps or []),
        warnings=list(warnings or []),
    )


def failure(output: str, errors: list[str] | None = None, next_steps: list[str] | None = None) -> CommandResult:
    return CommandResult(
        success=False,
        output=output,
        next_steps=list(next_steps or []),
        errors=list(errors or []),
    )


def format_result(result: CommandResult) -> str:
    lines = []
    if result.output:
        lines.append(result.output)
    if result.warnings:
        lines.append("")
        lines.extend(f"WARNING: {w}" for w in result.warnings)
    if result.errors:
        lines.append("")
        lines.extend(f"ERROR: {e}" for e in result.errors)
    if result.next_steps:
        lines.append("")
        lines.append("Next steps:")
        lines.extend(f"  {step}" for step in result.next_steps)
    return "\n".join(lines)
