"""CLI entrypoints for tokengen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, TokenGenConfig, load_config, parse_group_depth
from .git.deploy import Deployer
from .logging import configure_logging
from .pipeline import BuildPipeline


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project",
        default=".",
        help="Project root or .tokengen.yml path (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tokengen",
        description="Generate platform source files from design-token documents.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Normalize the token document and write generated sources.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "--source",
        type=Path,
        default=None,
        help="Token document to read (overrides config and TOKEN_V2_PATH).",
    )
    build_parser.add_argument(
        "--group-depth",
        default=None,
        help="Number of leading path segments per output file (<= 0 means full depth).",
    )
    build_parser.add_argument(
        "--build-dir",
        type=Path,
        default=None,
        help="Directory receiving generated files.",
    )

    deploy_parser = subparsers.add_parser(
        "deploy",
        help="Copy generated files into target repositories and open pull requests.",
    )
    _add_verbose_option(deploy_parser, suppress_default=True)
    _add_path_argument(deploy_parser)
    deploy_parser.add_argument(
        "target",
        nargs="?",
        default="all",
        help="Deploy target name from .tokengen.yml, or 'all' (default).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for tokengen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.project))
    except ConfigError as exc:
        parser.exit(1, f"tokengen: {exc}\n")

    if args.command == "build":
        _apply_build_overrides(config, args)
        try:
            result = BuildPipeline(config).run()
        except (OSError, ValueError, TypeError) as exc:
            parser.exit(1, f"tokengen build failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Generated {len(result.files)} file(s) in {_relativize(config.build_dir)}")
    elif args.command == "deploy":
        targets = config.deploy.targets
        if args.target != "all":
            if args.target not in targets:
                available = ", ".join(sorted(targets)) or "(none configured)"
                parser.exit(1, f"Unknown deploy target: {args.target}\nAvailable targets: {available}\n")
            targets = {args.target: targets[args.target]}
        if not targets:
            parser.exit(1, "No deploy targets configured in .tokengen.yml\n")
        results = Deployer().deploy_all(targets, config.build_dir)
        for name, published in results.items():
            print(f"{name}: {'pull request opened' if published else 'no pull request opened'}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _apply_build_overrides(config: TokenGenConfig, args: argparse.Namespace) -> None:
    if args.source is not None:
        config.source = args.source.expanduser().resolve()
    if args.group_depth is not None:
        config.group_depth = parse_group_depth(args.group_depth)
    if args.build_dir is not None:
        config.build_dir = args.build_dir.expanduser().resolve()


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
