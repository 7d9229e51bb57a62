"""CLI interface for skillkit."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from skillkit import __version__

console = Console()
err_console = Console(stderr=True)


def _setup(config_path: str):
    from skillkit.config import load_config
    from skillkit.utils import setup_logging

    cfg = load_config(config_path)
    setup_logging(cfg.logging.level, cfg.logging.format)
    return cfg


def _registry(config_path: str, roots: tuple[str, ...]):
    """Build a registry from config, with roots on the command line taking precedence."""
    from skillkit.skills import SkillRegistry

    cfg = _setup(config_path)
    skills_cfg = cfg.skills
    if roots:
        skills_cfg = skills_cfg.model_copy(update={"roots": list(roots)})
    registry = SkillRegistry.from_config(skills_cfg)
    registry.rebuild()
    return cfg, registry


@click.group()
@click.version_option(version=__version__, prog_name="skillkit")
def cli():
    """skillkit - discover, validate and load agent skill packages."""
    pass


@cli.command()
@click.argument("name")
@click.option("--path", "-p", default=".", help="Directory to create the skill in")
@click.option("--description", "-d", default=None, help="Skill description")
def init(name: str, path: str, description: str | None):
    """Create a new skill directory from the template."""
    from skillkit.skills.authoring import init_skill
    from skillkit.skills.errors import SkillError

    try:
        skill_dir = init_skill(name, path, description=description)
    except (SkillError, FileExistsError) as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    console.print(f"[green]Created skill {name} at {skill_dir}[/]")
    console.print("Edit SKILL.md and add reference files, scripts and assets as needed.")


@cli.command()
@click.argument("skill_dir", type=click.Path(file_okay=False))
def validate(skill_dir: str):
    """Validate a skill directory."""
    from skillkit.skills.authoring import quick_validate

    report = quick_validate(skill_dir)
    if report.valid:
        console.print(f"[green]✓ Skill is valid:[/] {escape(skill_dir)}")
        return

    console.print(f"[red]✗ {len(report.errors)} problem(s) in[/] {escape(skill_dir)}")
    for error in report.errors:
        console.print(f"  - {escape(error)}")
    sys.exit(1)


@cli.command()
@click.argument("skill_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--output", "-o", default=None, help="Directory to write the .skill archive to")
def package(skill_dir: str, output: str | None):
    """Validate and package a skill into a .skill archive."""
    from skillkit.skills.authoring import package_skill
    from skillkit.skills.errors import SkillError
    from skillkit.utils import hash_bytes

    try:
        archive = package_skill(skill_dir, output)
    except SkillError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    console.print(f"[green]Packaged {archive}[/]")
    console.print(f"[dim]sha256 {hash_bytes(archive.read_bytes())}[/]")


@cli.command()
@click.argument("roots", nargs=-1, type=click.Path(file_okay=False))
@click.option("--config", "-c", default="skillkit.yaml", help="Config file path")
def index(roots: tuple[str, ...], config: str):
    """List discovered skills and discovery problems."""
    from skillkit.skills.errors import DuplicateNameError
    from skillkit.utils import truncate_string

    try:
        _, registry = _registry(config, roots)
    except DuplicateNameError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    skill_index = registry.index
    if not len(skill_index):
        console.print("[yellow]No skills found.[/]")
    else:
        table = Table(title="Skills")
        table.add_column("Name")
        table.add_column("Description")
        table.add_column("Files", justify="right")

        for name in skill_index.names():
            pkg = skill_index.lookup(name)
            table.add_row(name, truncate_string(pkg.metadata.description, 80), str(len(pkg.resources)))

        console.print(table)

    if registry.errors:
        console.print(f"\n[yellow]{len(registry.errors)} skill directory(s) skipped:[/]")
        for error in registry.errors:
            reason = error.code
            if error.field:
                reason += f" {error.field}"
                if error.constraint:
                    reason += f"/{error.constraint}"
            console.print(f"  - {escape(str(error.directory))} [dim]({escape(reason)})[/] {escape(error.message)}")


@cli.command()
@click.argument("name")
@click.option("--config", "-c", default="skillkit.yaml", help="Config file path")
@click.option("--root", "-r", "roots", multiple=True, help="Skill root (overrides config)")
def show(name: str, config: str, roots: tuple[str, ...]):
    """Show a skill's instructions."""
    from skillkit.skills import ProgressiveLoader
    from skillkit.skills.errors import SkillError

    try:
        _, registry = _registry(config, roots)
        body = ProgressiveLoader(registry).load_body(name)
    except SkillError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    pkg = registry.index.lookup(name)
    console.print(Panel(Markdown(body), title=f"[bold green]{name}[/]", border_style="green"))
    if pkg.resources:
        console.print("[dim]Files:[/]")
        for path in pkg.resources:
            console.print(f"  [dim]{path}[/]")


@cli.command()
@click.argument("name")
@click.argument("path")
@click.option("--config", "-c", default="skillkit.yaml", help="Config file path")
@click.option("--root", "-r", "roots", multiple=True, help="Skill root (overrides config)")
def read(name: str, path: str, config: str, roots: tuple[str, ...]):
    """Write a skill's bundled file to stdout."""
    from skillkit.skills import ProgressiveLoader
    from skillkit.skills.errors import SkillError

    try:
        cfg, registry = _registry(config, roots)
        loader = ProgressiveLoader(registry, max_resource_bytes=cfg.skills.max_resource_bytes)
        content = loader.load_resource(name, path)
    except SkillError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    click.get_binary_stream("stdout").write(content)


@cli.command("config")
@click.option("--path", "-p", default="skillkit.yaml", help="Where to write the config")
def config_cmd(path: str):
    """Generate a default skillkit.yaml."""
    from skillkit.config import generate_default_config

    if Path(path).exists():
        if not click.confirm(f"{path} already exists. Overwrite?"):
            console.print("[yellow]Cancelled.[/]")
            return

    generate_default_config(path)
    console.print(f"[green]Created {path}[/]")


if __name__ == "__main__":
    cli()
