"""Command line entry point of the age-check batch."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Mapping, Sequence

from asdbatch.config import Factory
from asdbatch.process import ASDProcess


def parse_args(
    argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None
) -> Factory:
    """Build the factory from the command line and environment.

    ``$CONFIG_SET`` chooses the mode: LIVE takes ``-config_home`` and
    ``-config_url``, any other set takes ``-app-env``.
    """
    env = os.environ if environ is None else environ
    live = env.get("CONFIG_SET", "") == "LIVE"

    parser = argparse.ArgumentParser(prog="asdbatch")
    parser.add_argument("-config_set", "--config_set", dest="config_set",
                        default=env.get("CONFIG_SET", ""), help="config set")
    if live:
        parser.add_argument("-config_home", "--config_home", dest="config_home",
                            default=env.get("CONFIG_HOME", ""), help="app env")
        parser.add_argument("-config_url", "--config_url", dest="config_url",
                            default=env.get("CONFIG_URL", ""), help="config url")
    else:
        parser.add_argument("-app-env", "--app-env", dest="app_env",
                            default=env.get("CONFIG_HOME", ""), help="app env")
    args = parser.parse_args(argv)

    if live:
        return Factory(json_config_path=args.config_home, json_config_url=args.config_url,
                       config_set=args.config_set)
    return Factory(json_config_path=args.app_env or "./", config_set=args.config_set)


def main(argv: Sequence[str] | None = None) -> int:
    factory = parse_args(argv, os.environ)
    if factory.config_set == "LIVE":
        print("CONFIG_HOME:", factory.json_config_path)
        print("CONFIG_URL:", factory.json_config_url)
    print("CONFIG_SET:", factory.config_set)

    with factory:
        try:
            factory.initialize()
        except ValueError as exc:
            print(f"invalid configuration: {exc}", file=sys.stderr)
            return 1
        ASDProcess(factory).processing()
    return 0


if __name__ == "__main__":
    sys.exit(main())