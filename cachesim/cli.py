from pathlib import Path
from typing import List, Optional

import click
import yaml

from cachesim.config import SimulatorConfig, load_simulator_config, merge_cache_config
from cachesim.entity.model import CacheConfig, CacheConfigError, TraceFormatError
from cachesim.entity.report import Statistics
from cachesim.memory.memory_manager import SetAssociativeCache
from cachesim.replay import TraceReplayer, format_step
from cachesim.trace import read_trace

import logging
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

EPILOG = """\b
Examples:
  csim -s 4 -E 1 -b 4 -t traces/yi.trace
  csim -v -s 8 -E 2 -b 4 -t traces/yi.trace
  csim -c sim.yaml -t traces/trans.trace -t traces/long.trace
"""


def _setup_logging(level: str, log_file: Optional[str]) -> None:
    root = logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT)
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    if log_file:
        log_path = Path(log_file)
        # Avoid adding duplicate handlers for the same file
        for handler in root.handlers:
            if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_path.resolve():
                break
        else:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_path, encoding="utf-8")
            handler.setFormatter(formatter)
            root.addHandler(handler)
    root.setLevel(level.upper())


def run_trace(config: CacheConfig, trace_file: str, verbose: bool = False) -> Statistics:
    """Replay one trace file against a freshly built cache."""
    cache = SetAssociativeCache(config)
    replayer = TraceReplayer(cache)
    try:
        for record, results in replayer.iter_replay(read_trace(trace_file)):
            if verbose and results:
                click.echo(format_step(record, results))
    except OSError as e:
        raise click.ClickException(f"cannot read trace file {trace_file}: {e.strerror or e}")
    except TraceFormatError as e:
        raise click.ClickException(f"{trace_file}: {e}")
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("final cache state for %s:\n%s", trace_file, cache.dump())
    logger.info("%s: %s", trace_file, replayer.stats.summary())
    return replayer.stats


@click.command(context_settings=dict(help_option_names=["-h", "--help"]), epilog=EPILOG)
@click.option("-s", "s", type=int, help="Number of set index bits (S = 2^s is the number of sets).")
@click.option("-E", "E", type=int, help="Associativity (number of lines per set).")
@click.option("-b", "b", type=int, help="Number of block offset bits (B = 2^b is the block size).")
@click.option("-t", "--trace", "traces", multiple=True,
              type=click.Path(exists=True, dir_okay=False),
              help="Trace file to replay. Repeat to replay several traces, each on a fresh cache.")
@click.option("-v", "--verbose", is_flag=True, help="Display trace info for every access.")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file providing cache (s, E, b), verbose and traces.")
@click.option("--log-level", default="warning", show_default=True,
              type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False))
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write log records to this file.")
def main(s, E, b, traces, verbose, config_path, log_level, log_file):
    """Replay a memory trace through an LRU set-associative cache."""
    _setup_logging(log_level, log_file)

    file_config: Optional[SimulatorConfig] = None
    if config_path:
        try:
            file_config = load_simulator_config(config_path)
        except (OSError, KeyError, TypeError, ValueError, yaml.YAMLError) as e:
            raise click.UsageError(f"invalid config file {config_path}: {e}")

    try:
        config = merge_cache_config(
            file_config.cache if file_config else None, s=s, E=E, b=b)
    except KeyError as e:
        raise click.UsageError(f"Missing required command line argument: {e.args[0]}")
    except CacheConfigError as e:
        raise click.UsageError(str(e))

    trace_files: List[str] = list(traces) or (file_config.traces if file_config else [])
    if not trace_files:
        raise click.UsageError("Missing required command line argument: -t <tracefile>")
    verbose = verbose or (file_config.verbose if file_config else False)

    logger.info("S=%d E=%d B=%d traces=%s", config.num_sets, config.E,
                config.block_size, ", ".join(trace_files))
    for trace_file in trace_files:
        stats = run_trace(config, trace_file, verbose=verbose)
        if len(trace_files) > 1:
            click.echo(f"{trace_file}: {stats.summary()}")
        else:
            click.echo(stats.summary())


if __name__ == "__main__":
    main()
