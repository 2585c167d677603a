"""Demo command: arm the sample fuses and poll until they have all fired."""

from pathlib import Path
from typing import Annotated

import typer

from fusebox.cli.console import console, dim, error, success, warning

CLOCK_CHOICES = ("manual", "monotonic", "wall")


def register(app: typer.Typer) -> None:
    """Register the demo command."""

    @app.command()
    def demo(
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        time_scale: Annotated[
            float | None,
            typer.Option(
                "--time-scale",
                "-t",
                help="Multiply every fuse duration (0.1 = ten times faster)",
            ),
        ] = None,
        clock: Annotated[
            str | None,
            typer.Option(
                "--clock",
                help="Time source: manual (instant), monotonic, wall",
            ),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option(
                "--log-level",
                "-l",
                help="Log level (DEBUG, INFO, WARNING, ERROR)",
            ),
        ] = None,
    ) -> None:
        """Arm the sample fuses and print each message as it fires."""
        from fusebox.clock import Clock, ManualClock, get_clock
        from fusebox.config import ConfigError, load_config_or_default
        from fusebox.container import FuseContainer
        from fusebox.driver import FuseDriver
        from fusebox.logging import configure_logging

        try:
            cfg = load_config_or_default(config_path)
        except FileNotFoundError as e:
            error(str(e))
            raise typer.Exit(1) from None
        except (ConfigError, ValueError) as e:
            # Covers TOML syntax errors and pydantic ValidationError
            error(f"Invalid configuration: {e}")
            raise typer.Exit(1) from None

        configure_logging(
            level=log_level or cfg.logging.level,
            use_rich=cfg.logging.rich,
            log_to_file=cfg.logging.to_file,
            retention_days=cfg.logging.retention_days,
        )

        clock_name = clock or cfg.clock
        if clock_name not in CLOCK_CHOICES:
            error(f"Unknown clock: {clock_name}")
            console.print(f"Valid clocks: {', '.join(CLOCK_CHOICES)}")
            raise typer.Exit(1)
        time_source: Clock = (
            ManualClock() if clock_name == "manual" else get_clock(clock_name)
        )

        scale = time_scale if time_scale is not None else cfg.demo.time_scale
        if scale <= 0:
            error("--time-scale must be positive")
            raise typer.Exit(1)

        if not cfg.demo.fuses:
            warning("No demo fuses configured")
            raise typer.Exit(0)

        def announce(message: str) -> None:
            console.print(message, markup=False, highlight=False)

        with FuseContainer(clock=time_source) as container:
            for fuse in cfg.demo.fuses:
                container.add(fuse.message, fuse.seconds * scale, announce)
            dim(f"Armed {container.count} fuses ({clock_name} clock)")

            driver = FuseDriver(
                container,
                poll_interval=cfg.poll_interval,
                heartbeat_interval=cfg.heartbeat_interval,
            )
            try:
                stats = driver.run()
            except KeyboardInterrupt:
                warning(f"Interrupted with {container.count} fuses still armed")
                raise typer.Exit(130) from None

        success(
            f"All {stats.fired} fuses fired in {stats.elapsed:.2f}s "
            f"({stats.polls} polls)"
        )
