#!/usr/bin/env python3
"""
roagen - ROA dataset generation for RPSL route object registries

Usage examples:
roagen generate ./registry roa.json
roagen generate ./registry roa.json --workers 4 --report discarded.yaml
roagen check ./registry ./registry/data/route/172.20.0.0_24
"""

import argparse
import logging
import sys
from pathlib import Path

from roagen import __version__
from roagen.collectors.registry import RegistrySource
from roagen.generators.roa import ROAResolver, ResolutionOutcome
from roagen.pipeline.workflow import ROAPipeline, PipelineConfig
from roagen.processors.rpsl import RouteObjectParser
from roagen.utils.config import get_config_manager, reset_config_manager
from roagen.utils.error_handling import (
    ErrorFormatter, RoagenError, ValidationError, handle_errors,
    print_success, print_warning, validate_common_args
)
from roagen.utils.exit_codes import RoagenExitCodes
from roagen.utils.logging import log_system_info, setup_logging


def setup_app_logging(verbose: bool = False, quiet: bool = False):
    """Configure logging for the application"""
    if quiet:
        level = 'WARNING'
    elif verbose:
        level = 'DEBUG'
    else:
        level = None  # configured level

    setup_logging(level=level, console_colors=True)

    if verbose:
        log_system_info()


@handle_errors('roagen.generate')
def cmd_generate(args):
    """Generate the ROA dataset for a registry"""
    config = get_config_manager().get_config()

    pipeline_config = PipelineConfig(
        registry=args.registry,
        output_file=args.output,
        report_file=args.report or config.output.report_file,
        max_workers=args.workers or config.processing.max_workers,
        indent=args.indent if args.indent is not None else config.output.indent,
    )

    result = ROAPipeline(pipeline_config, app_config=config).run()

    if not args.quiet:
        print_success(f"ROA dataset written to {args.output}")
        print(result.to_summary())

    if result.records_failed and not args.quiet:
        print_warning(f"{result.records_failed} route objects were skipped because of errors",
                      "Run with --report to list them")

    return int(RoagenExitCodes.SUCCESS)


@handle_errors('roagen.check')
def cmd_check(args):
    """Resolve a single route object and explain the result"""
    config = get_config_manager().get_config()

    pipeline = ROAPipeline(PipelineConfig(registry=args.registry), app_config=config)
    ruleset = pipeline.load_rules()

    route_path = Path(args.route_file)
    text = RegistrySource(route_path.parent).read_text(route_path.name)
    record = RouteObjectParser().parse(text, source=route_path.name)

    resolution = ROAResolver(ruleset).explain(record)

    print(f"Route object: {route_path.name}")
    print(f"  Prefix: {resolution.prefix}")
    print(f"  Origins: {', '.join(record.origins) or 'none'}")
    print(f"  Requested max-length: {record.max_length if record.max_length is not None else 'not set'}")
    print(f"  Matched rule: {resolution.rule}")

    if resolution.outcome is ResolutionOutcome.DENIED:
        print_warning("Denied by policy - no ROA entries")
    elif resolution.outcome is ResolutionOutcome.TOO_SPECIFIC:
        print_warning(
            f"Prefix length {resolution.prefix.prefix_length} exceeds effective "
            f"max-length {resolution.effective_max_length} - no ROA entries"
        )
    else:
        print(f"  Effective max-length: {resolution.effective_max_length}")
        print_success(f"{len(resolution.entries)} ROA entries")
        for entry in resolution.entries:
            print(f"    {entry.prefix} max {entry.max_length} {entry.asn}")

    return int(RoagenExitCodes.SUCCESS)


def create_common_flags_parent(suppress_defaults: bool = False):
    """
    Create a parent parser with common global flags

    Subcommand copies suppress their defaults so a flag given before the
    subcommand is not reset by the subcommand parser.
    """
    parent_parser = argparse.ArgumentParser(add_help=False)
    flag_default = argparse.SUPPRESS if suppress_defaults else False
    path_default = argparse.SUPPRESS if suppress_defaults else None

    verbose_group = parent_parser.add_mutually_exclusive_group()
    verbose_group.add_argument('-v', '--verbose', action='store_true', default=flag_default,
                               help='Enable verbose logging')
    verbose_group.add_argument('-q', '--quiet', action='store_true', default=flag_default,
                               help='Quiet mode (warnings only)')

    parent_parser.add_argument('--config', metavar='PATH', default=path_default,
                               help='Path to a JSON configuration file')

    return parent_parser


def create_parser():
    """Create and configure argument parser"""
    common_flags_parent = create_common_flags_parent(suppress_defaults=True)

    parser = argparse.ArgumentParser(
        prog='roagen',
        description='roagen - ROA dataset generation for RPSL registries',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
        parents=[create_common_flags_parent()]
    )

    parser.add_argument('--version', action='version', version=f'roagen {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    generate_parser = subparsers.add_parser('generate',
                                            parents=[common_flags_parent],
                                            help='Generate the ROA JSON dataset')
    generate_parser.add_argument('registry',
                                 help='Registry root directory (contains data/)')
    generate_parser.add_argument('output',
                                 help='Output JSON file')
    generate_parser.add_argument('--workers', type=int, metavar='N',
                                 help='Resolve route objects on N threads')
    generate_parser.add_argument('--report', metavar='PATH',
                                 help='Write a YAML report of discarded input')
    generate_parser.add_argument('--indent', type=int, metavar='N',
                                 help='Pretty-print JSON with N spaces (default: compact)')

    check_parser = subparsers.add_parser('check',
                                         parents=[common_flags_parent],
                                         help='Explain how one route object resolves')
    check_parser.add_argument('registry',
                              help='Registry root directory (contains data/)')
    check_parser.add_argument('route_file',
                              help='Route or route6 object file')

    return parser


def main(argv=None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return int(RoagenExitCodes.INVALID_USAGE)

    reset_config_manager()
    try:
        config_manager = get_config_manager(Path(args.config) if args.config else None)
    except RoagenError as e:
        print(ErrorFormatter.format_error(e))
        return int(e.exit_code)

    issues = config_manager.validate_config()
    if issues:
        for issue in issues:
            print(ErrorFormatter.format_message(issue))
        return int(RoagenExitCodes.CONFIG_ERROR)

    setup_app_logging(args.verbose, args.quiet)

    try:
        args = validate_common_args(args)
    except ValidationError as e:
        print(ErrorFormatter.format_error(e))
        return int(e.exit_code)

    command_functions = {
        'generate': cmd_generate,
        'check': cmd_check,
    }

    try:
        return command_functions[args.command](args)
    except KeyboardInterrupt:
        print_warning("Operation interrupted by user")
        return int(RoagenExitCodes.INTERRUPTED)
    except Exception as e:
        logger = logging.getLogger('roagen.main')
        logger.error(f"Unexpected error: {e}")
        print(ErrorFormatter.format_error(e, hide_technical=not args.verbose))
        return int(RoagenExitCodes.GENERAL_ERROR)


if __name__ == '__main__':
    sys.exit(main())
