"""
Vale Sync CLI entry point.

Usage:
    python -m modules.vale_sync config           Show effective configuration
    python -m modules.vale_sync test             Test connections
    python -m modules.vale_sync list <kind>      List entities of one kind
    python -m modules.vale_sync portfolio        Show portfolio dashboard
    python -m modules.vale_sync projects         Show rehab project rollup
"""

import argparse
import asyncio
import sys

from .config import Config, config
from .exceptions import ConfigError
from .kinds import EntityKind
from .logging_setup import setup_logging
from .session import ValeSession
from . import summaries


def _load_config(path):
    return Config.from_yaml(path) if path else config


def _check_config(cfg: Config) -> bool:
    errors = cfg.validate()
    if errors:
        print("\n[CONFIG ERRORS]")
        for err in errors:
            print(f"  - {err}")
        return False
    return True


def _describe(kind: EntityKind, entity) -> str:
    if kind in (EntityKind.LEAD, EntityKind.CLIENT, EntityKind.RESIDENT):
        label = entity.full_name or '(no name)'
    elif kind == EntityKind.TASK:
        label = entity.title
    elif kind == EntityKind.COMMUNICATION:
        label = entity.display_title
    elif kind == EntityKind.REHAB_PROJECT:
        label = entity.display_name
    elif kind == EntityKind.PROPERTY:
        label = entity.address or '(no address)'
    else:
        label = getattr(entity, 'status', None) or ''
    return f"[{entity.id}] {label}"


def cmd_config(cfg: Config, args) -> int:
    """Show effective configuration with secrets masked."""
    print("=" * 60)
    print("Vale Sync Configuration")
    print("=" * 60)
    for key, value in cfg.as_dict().items():
        print(f"  {key:22} {value}")

    errors = cfg.validate()
    if errors:
        print("\n[CONFIG ERRORS]")
        for err in errors:
            print(f"  - {err}")
        return 1
    return 0


def cmd_test(cfg: Config, args) -> int:
    """Test the Vale API connection."""
    print("=" * 60)
    print("Vale Sync Connection Test")
    print("=" * 60)

    if not _check_config(cfg):
        return 1

    print(f"\nEnvironment: {cfg.VALE_ENV}")
    print(f"API: {cfg.API_BASE_URL}")

    print("\n[Vale API]")
    session = ValeSession(cfg)
    try:
        count = session.gateway.test_connection()
    except Exception as e:
        print(f"  ✗ Connection failed: {e}")
        return 1
    print(f"  ✓ Connected, {count} leads visible")

    print("\n[HubSpot]")
    if session.bridge is None:
        print("  - Push disabled")
    else:
        print("  ✓ Push enabled")

    return 0


def cmd_list(cfg: Config, args) -> int:
    """List every entity of one kind."""
    kind = EntityKind(args.kind)
    session = ValeSession(cfg)
    store = session.store(kind)

    async def run():
        if store in session.stores.values():
            return await store.fetch_all()
        return await session.portfolio.refresh()

    ok = asyncio.run(run())
    if not ok:
        print(f"✗ {store.error_message or session.portfolio.error_message}")
        return 1

    print(f"{len(store)} {kind.value} entities")
    for entity in store:
        print(f"  {_describe(kind, entity)}")
    return 0


def cmd_portfolio(cfg: Config, args) -> int:
    """Show portfolio dashboard metrics."""
    session = ValeSession(cfg)
    if not asyncio.run(session.portfolio.refresh()):
        print(f"✗ {session.portfolio.error_message}")
        return 1

    print("=" * 60)
    print("Portfolio Dashboard")
    print("=" * 60)
    for key, value in session.portfolio.dashboard().items():
        if isinstance(value, float):
            value = f"{value:,.2f}"
        print(f"  {key:24} {value}")
    return 0


def cmd_projects(cfg: Config, args) -> int:
    """Show rehab project totals."""
    session = ValeSession(cfg)
    if not asyncio.run(session.projects.fetch_all()):
        print(f"✗ {session.projects.error_message}")
        return 1

    print("=" * 60)
    print("Rehab Projects")
    print("=" * 60)
    for project in session.projects:
        utilization = summaries.project_utilization(project)
        print(f"  {project.display_name:30} {project.status:12} {utilization:6.1f}% utilized")

    print()
    for key, value in summaries.rehab_summary(session.projects.entities).items():
        if isinstance(value, float):
            value = f"{value:,.2f}"
        print(f"  {key:20} {value}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description='Vale Sync - Vale CRM API ↔ HubSpot')
    parser.add_argument('--config', help='Optional YAML config file')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('config', help='Show effective configuration')
    subparsers.add_parser('test', help='Test connections')
    list_parser = subparsers.add_parser('list', help='List entities of one kind')
    list_parser.add_argument('kind', choices=[k.value for k in EntityKind])
    subparsers.add_parser('portfolio', help='Show portfolio dashboard')
    subparsers.add_parser('projects', help='Show rehab project rollup')

    args = parser.parse_args(argv)
    try:
        cfg = _load_config(args.config)
    except ConfigError as e:
        print(f"[CONFIG ERROR] {e}")
        return 1
    setup_logging(cfg)

    commands = {
        'config': cmd_config,
        'test': cmd_test,
        'list': cmd_list,
        'portfolio': cmd_portfolio,
        'projects': cmd_projects,
    }

    return commands[args.command](cfg, args)


if __name__ == '__main__':
    sys.exit(main())
