"""Entry point — python -m namenode_exporter."""

from __future__ import annotations

import argparse
import asyncio

# Flag name -> dotted settings key
FLAG_SETTINGS = {
    "listen_address": "web.listen_address",
    "telemetry_path": "web.telemetry_path",
    "jmx_url": "namenode.jmx_url",
    "timeout": "namenode.timeout",
    "log_level": "logging.level",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="namenode_exporter",
        description="Prometheus exporter for HDFS NameNode JMX metrics",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to configuration YAML file",
        default=None,
    )
    parser.add_argument(
        "--web.listen-address", dest="listen_address",
        help="Address on which to expose metrics and web interface (default :9070)",
    )
    parser.add_argument(
        "--web.telemetry-path", dest="telemetry_path",
        help="Path under which to expose metrics (default /metrics)",
    )
    parser.add_argument(
        "--namenode.jmx.url", dest="jmx_url",
        help="Hadoop JMX URL (default http://localhost:50070/jmx)",
    )
    parser.add_argument(
        "--namenode.timeout", dest="timeout", type=float,
        help="Upstream fetch timeout in seconds (default 10)",
    )
    parser.add_argument(
        "--log.level", dest="log_level",
        help="Logging level (default INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    from namenode_exporter.app import Application
    from namenode_exporter.config.settings import apply_overrides, load_config

    settings = apply_overrides(
        load_config(args.config),
        {key: getattr(args, flag) for flag, key in FLAG_SETTINGS.items()},
    )
    app = Application(settings=settings)
    try:
        asyncio.run(app.start())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
