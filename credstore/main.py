"""
Command line entry point for credstore.
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from . import config
from .config import StoreSettings
from .errors import CredentialStoreError
from .native import NativeCredential
from .store import CredentialStore

EXIT_OK = 0
EXIT_ERROR = 1


def _add_addressing(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", help="Credential name within the namespace")
    parser.add_argument("--namespace", help="Namespace of the credential (default: configured namespace)")
    parser.add_argument("--target", help="Full vault target, used as given")


def _add_gate(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--whatif", action="store_true", help="Show what would change without changing it")
    parser.add_argument("--confirm", action="store_true", help="Ask before changing the vault")


def _proceed(args, action: str, description: str) -> bool:
    """Decide whether a mutation goes ahead, asking on stdin when --confirm is set."""
    if args.whatif:
        print(f"What if: {action} {description}")
        return False
    if args.confirm:
        answer = input(f"{action} {description}? [y/N] ")
        return answer.strip().lower() in ("y", "yes")
    return True


def handle_get(store: CredentialStore, args) -> int:
    kwargs = {"name": args.name, "namespace": args.namespace, "raw": args.raw, "all": args.all}
    if args.target is not None:
        kwargs["target"] = args.target
    for record in store.fetch(**kwargs):
        if isinstance(record, NativeCredential):
            print(f"{record.target}\t{record.identity or ''}\t{record.kind.name}")
        elif args.show_secret:
            print(f"{record.target}\t{record.identity}\t{record.secret.reveal()}")
        else:
            print(f"{record.target}\t{record.identity}\t{config.MASKED_SECRET_TEXT}")
    return EXIT_OK


def handle_set(store: CredentialStore, args) -> int:
    description = args.target or store.target_for(args.name or args.identity, args.namespace)
    proceed = _proceed(args, "Save credential", description)
    # Secret is read only once the write will go ahead.
    secret = getpass.getpass(f"Secret for {args.identity}: ") if proceed else ""
    result = store.save(
        args.identity,
        secret,
        name=args.name,
        namespace=args.namespace,
        target=args.target,
        allow_clobber=args.allow_clobber,
        proceed=proceed,
    )
    if result.performed:
        print(f"Saved {result.target}")
    return EXIT_OK


def handle_remove(store: CredentialStore, args) -> int:
    description = args.target or (store.target_for(args.name, args.namespace) if args.name else "")
    proceed = _proceed(args, "Remove credential", description)
    result = store.remove(name=args.name, namespace=args.namespace, target=args.target, proceed=proceed)
    if result.performed:
        print(f"Removed {result.target}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=config.APP_NAME, description="Manage named secrets in the OS credential vault")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="List or fetch credentials")
    _add_addressing(get_parser)
    get_parser.add_argument("--all", action="store_true", help="Include credentials of every namespace")
    get_parser.add_argument("--raw", action="store_true", help="Show native vault records")
    get_parser.add_argument("--show-secret", action="store_true", help="Print secrets in plain text")
    get_parser.set_defaults(func=handle_get)

    set_parser = subparsers.add_parser("set", help="Save a credential")
    set_parser.add_argument("identity", help="User name stored with the secret")
    _add_addressing(set_parser)
    set_parser.add_argument("--allow-clobber", action="store_true", help="Overwrite an existing credential")
    _add_gate(set_parser)
    set_parser.set_defaults(func=handle_set)

    remove_parser = subparsers.add_parser("remove", help="Remove a credential")
    _add_addressing(remove_parser)
    _add_gate(remove_parser)
    remove_parser.set_defaults(func=handle_remove)

    return parser


def main(argv: Optional[List[str]] = None, store: Optional[CredentialStore] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=config.LOG_FORMAT)

    if store is None:
        store = CredentialStore(settings=StoreSettings.from_env())
    try:
        return args.func(store, args)
    except CredentialStoreError as e:
        print(f"{config.APP_NAME}: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
