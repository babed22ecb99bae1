"""
Command-line entry point for Pax AI Hook.

Usage:
    paxhook serve [--upstream URL] [--host HOST] [--port PORT]
    paxhook probe [--base-url URL]
    paxhook ask "Hello there"

All commands read config.yaml (see config.example.yaml) or fall back to
defaults when the file is absent. The API key may come from PAXHOOK_API_KEY.
"""

import argparse
import asyncio
import os
import sys
from typing import Optional, Sequence

from paxhook.foundation.config import ConfigManager, ProviderConfig
from paxhook.foundation.logging import logger, setup_logger
from paxhook.modules.llm_client import LLMClient
from paxhook.modules.llm_client.providers import CopilotProvider
from paxhook.modules.interception import RequestClassifier, ResponseReshaper

DEFAULT_UPSTREAM = "https://paxhistoria.co"


def log_active_provider(settings: ProviderConfig) -> None:
    logger.info(f"Active AI backend: {settings.label}")


def bootstrap(config_path: str) -> ConfigManager:
    config_manager = ConfigManager.get_instance()
    if os.path.exists(config_path):
        config_manager.load_config(config_path)
    else:
        config_manager.load_defaults()
    setup_logger(config_manager.config)
    if not os.path.exists(config_path):
        logger.warning(f"{config_path} not found, using default settings.")

    config_manager.add_listener(log_active_provider)
    log_active_provider(config_manager.get_settings())
    return config_manager


def cmd_serve(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    import uvicorn
    from paxhook.modules.interception.proxy import create_app

    app = create_app(config_manager, upstream=args.upstream)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    return 0


def cmd_probe(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    base_url = args.base_url or config_manager.config.hook.copilot_base_url
    result = asyncio.run(CopilotProvider().test_connection(base_url))
    if not result.success:
        logger.error(f"Copilot API offline at {base_url}: {result.error}")
        return 1

    logger.info(f"Copilot API online at {base_url} ({len(result.data)} models)")
    for model_id in result.data:
        print(model_id)
    return 0


async def _ask(prompt: str, config_manager: ConfigManager) -> str:
    request = RequestClassifier().classify({"prompt": prompt, "promptStage": "chatWithUser"})
    result = await LLMClient().complete(request, config_manager.get_settings())
    return ResponseReshaper().reshape(result.raw_text, request.mode).body


def cmd_ask(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    if args.provider:
        config_manager.update_settings(provider=args.provider)

    print(asyncio.run(_ask(args.prompt, config_manager)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="paxhook", description="Custom AI backend for Pax Historia")
    parser.add_argument("--config", default="config.yaml", help="Path to config YAML (default: config.yaml)")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the local intercepting reverse proxy")
    serve.add_argument("--upstream", default=DEFAULT_UPSTREAM, help="Original game backend URL")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8787)
    serve.set_defaults(func=cmd_serve)

    probe = sub.add_parser("probe", help="List models served by the Copilot API")
    probe.add_argument("--base-url", default=None)
    probe.set_defaults(func=cmd_probe)

    ask = sub.add_parser("ask", help="Send one chat prompt through the active provider")
    ask.add_argument("prompt")
    ask.add_argument("--provider", choices=["google", "openrouter", "copilot"], default=None)
    ask.set_defaults(func=cmd_ask)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config_manager = bootstrap(args.config)
    return args.func(args, config_manager)


if __name__ == "__main__":
    sys.exit(main())
