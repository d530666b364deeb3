"""Command line interface for the runner-controller benchmark."""

import sys
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.cluster import ClusterReader
from .core.config import BenchmarkConfig, ConfigLoader, load_env_config, merge_configs
from .core.executor import ProcessExecutor
from .core.orchestrator import BenchmarkOrchestrator
from .core.results import BenchmarkResult
from .core.vcs import GitClient
from .utils.logging import setup_logging


console = Console()
err_console = Console(stderr=True)


def _fail(message: str, e: Exception) -> None:
    err_console.print(f"[red]✗ {message}: {escape(str(e))}[/red]")
    sys.exit(1)


def _load_config(config_file: Optional[str], overrides: Dict[str, Any]) -> BenchmarkConfig:
    """CLI flags win over the YAML file, which wins over ARCBENCH_* variables."""
    config = load_env_config()
    if config_file:
        from_file = ConfigLoader.load_benchmark(config_file)
        config = merge_configs(config, from_file.dict(exclude_unset=True))
    return merge_configs(config, overrides)


@click.group()
@click.option('--log-level', help='Logging level [default: logLevel from the config, else INFO]')
@click.option('--log-file', help='Log file path [default: logFile from the config]')
@click.pass_context
def cli(ctx, log_level, log_file):
    """Measure how long a runner controller takes to work through triggered workflow runs."""
    ctx.ensure_object(dict)
    ctx.obj['log_level'] = log_level
    ctx.obj['log_file'] = log_file

    setup_logging(level=log_level or 'INFO', log_file=log_file)


def _apply_logging(ctx, config: BenchmarkConfig) -> None:
    """Reconfigure logging once the config is known; --log-level/--log-file still win."""
    setup_logging(
        level=ctx.obj['log_level'] or config.log_level,
        log_file=ctx.obj['log_file'] or config.log_file,
    )


@cli.command()
@click.option('--config', '-f', 'config_file', help='Benchmark configuration file (YAML)')
@click.option('--output', '-o', help='Results file; .csv exports CSV, anything else JSON')
@click.option('--temp-dir', help='Working directory for the clone. Defaults to <tmp>/arcbench/<timestamp>')
@click.option('--source-repo', help='Source repository, e.g. git@github.com:example/repo.git')
@click.option('--trigger-file', help='Trigger file inside the source repository [default: trigger.txt]')
@click.option('--controller-namespace', help='Namespace where the controller is running [default: arc-systems]')
@click.option('--runner-namespace', help='Namespace where the runners are created [default: arc-runners]')
@click.option('--triggers', type=int, help='Number of triggers [default: 1]')
@click.option('--poll-interval', type=float, help='Seconds between drain polls [default: 10]')
@click.option('--timeout', 'timeout_seconds', type=float, help='Give up after this many seconds (unbounded by default)')
@click.pass_context
def run(ctx, config_file, output, temp_dir, source_repo, trigger_file, controller_namespace,
        runner_namespace, triggers, poll_interval, timeout_seconds):
    """Run the benchmark."""
    try:
        config = _load_config(config_file, {
            'output': output,
            'temp_dir': temp_dir,
            'source_repo': source_repo,
            'trigger_file': trigger_file,
            'controller_namespace': controller_namespace,
            'runner_namespace': runner_namespace,
            'triggers': triggers,
            'poll_interval': poll_interval,
            'timeout_seconds': timeout_seconds,
        })
        _apply_logging(ctx, config)

        orchestrator = BenchmarkOrchestrator(config)
        result = orchestrator.run_benchmark()

        if config.output:
            path = orchestrator.result_collector.save(result, config.output)
            console.print(f"Results saved to: {path}")

        _display_results_summary(result)
        console.print("\n[green]✓ Benchmark completed successfully![/green]")

    except Exception as e:
        _fail("Benchmark failed", e)


def _display_results_summary(result: BenchmarkResult) -> None:
    """Display benchmark results summary."""
    table = Table(show_header=True, header_style="bold magenta", title="Benchmark Results Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Test ID", result.test_id)
    table.add_row("Source Repo", result.source_repo)
    table.add_row("Triggers", str(result.mutations))
    table.add_row("Start Polls", str(result.start_polls))
    table.add_row("Drain Polls", str(result.drain_polls))
    table.add_row("Peak Runners", str(result.peak_runners))
    table.add_row("Peak Pods", str(result.peak_pods))
    table.add_row("Elapsed", f"{result.elapsed_seconds:.1f}s")

    console.print(table)


@cli.command()
@click.option('--config', '-f', 'config_file', required=True, help='Benchmark configuration file to validate')
def validate(config_file):
    """Validate a configuration file."""
    try:
        console.print(f"[blue]Validating config: {escape(config_file)}[/blue]")
        config = ConfigLoader.load_benchmark(config_file)

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Source Repo", config.source_repo or "[red]missing[/red]")
        table.add_row("Trigger File", config.trigger_file)
        table.add_row("Triggers", str(config.triggers))
        table.add_row("Controller Namespace", config.controller_namespace)
        table.add_row("Runner Namespace", config.runner_namespace)
        table.add_row("Poll Interval", f"{config.poll_interval:g}s")
        table.add_row("Timeout", f"{config.timeout_seconds:g}s" if config.timeout_seconds else "none")

        console.print(table)

        if not config.source_repo:
            raise click.UsageError("sourceRepo is required to run the benchmark")
        console.print("[green]✓ Valid config[/green]")

    except Exception as e:
        _fail("Validation failed", e)


@cli.command()
@click.option('--config', '-f', 'config_file', help='Benchmark configuration file (YAML)')
@click.option('--source-repo', help='Also check that the source repository is reachable')
@click.option('--controller-namespace', help='Namespace where the controller is running')
@click.option('--runner-namespace', help='Namespace where the runners are created')
@click.pass_context
def preflight(ctx, config_file, source_repo, controller_namespace, runner_namespace):
    """Check cluster and repository access before a run."""
    try:
        config = _load_config(config_file, {
            'source_repo': source_repo,
            'controller_namespace': controller_namespace,
            'runner_namespace': runner_namespace,
        })
        _apply_logging(ctx, config)

        executor = ProcessExecutor()
        reader = ClusterReader(executor, command=config.kubectl_command)

        controller_pods = reader.list('pod', config.controller_namespace)
        runners = reader.list(config.runner_kind, config.runner_namespace)
        pods = reader.list(config.pod_kind, config.runner_namespace)

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Namespace", style="cyan")
        table.add_column("Kind", style="white")
        table.add_column("Count", style="green")

        table.add_row(config.controller_namespace, 'pod', str(len(controller_pods)))
        table.add_row(config.runner_namespace, config.runner_kind, str(len(runners)))
        table.add_row(config.runner_namespace, config.pod_kind, str(len(pods)))

        console.print(table)

        if config.source_repo:
            GitClient(executor, command=config.git_command).check_remote(config.source_repo)
            console.print(f"[green]✓[/green] Repository reachable: {escape(config.source_repo)}")

        if controller_pods.empty:
            console.print(f"[yellow]! No controller pods in {escape(config.controller_namespace)}[/yellow]")
        if not runners.empty or not pods.empty:
            console.print(
                f"[yellow]! {escape(config.runner_namespace)} is not idle[/yellow]"
            )

        console.print("[green]✓ Preflight completed[/green]")

    except Exception as e:
        _fail("Preflight failed", e)


def main():
    """Entry point for the arcbench CLI."""
    cli()


if __name__ == '__main__':
    main()
