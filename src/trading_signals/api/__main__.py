"""Allow running the API as: python -m trading_signals.api [--config path]."""

import argparse
import os

from trading_signals.api.runner import main

parser = argparse.ArgumentParser(description="Trading signals API server")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
if args.config:
    os.environ["TRADING_SIGNALS_CONFIG"] = args.config
main(config_path=args.config or os.environ.get("TRADING_SIGNALS_CONFIG"))
