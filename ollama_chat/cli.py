#!/usr/bin/env python3
"""
Main CLI application for Ollama Chat.
"""

import argparse
import logging
import os
import sys
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import after loading env vars to ensure proper configuration
from .bootstrap import build_container
from .infrastructure.config.settings import get_settings
from .presentation.cli import ChatCLI
from .utils import setup_logging


def _cmd_serve(args, container) -> int:
    import uvicorn
    from .api.app import create_app

    uvicorn.run(create_app(container), host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


def _cmd_models(args, container) -> int:
    catalog = container.model_catalog.catalog(args.session)
    if catalog.warning:
        print(f"⚠️ {catalog.warning}", file=sys.stderr)
    for descriptor in catalog.models:
        marker = '*' if descriptor.identifier == catalog.selected else ' '
        print(f"{marker} {descriptor.identifier}\t{descriptor.label}")
    return 0


def _cmd_chat(args, container) -> int:
    settings = container.settings
    cli = ChatCLI(
        container.chat_service,
        container.model_catalog,
        session_id=args.session,
        provider_prefix=settings.ollama.provider_prefix,
        quiet=args.quiet,
    )
    cli.load_models(args.model)
    if args.message:
        reply = cli.send(args.message.strip())
        if reply is None:
            return 1
        print(reply if args.quiet else f"🤖 Response: {reply}")
        return 0
    cli.interactive_mode()
    return 0


def main(argv=None):
    """Main entry point for Ollama Chat."""
    parser = argparse.ArgumentParser(
        description="Chat with models on a local Ollama server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s chat                                   # Interactive mode
  %(prog)s chat --message "Hello"                 # Single message
  %(prog)s chat --model ollama/mistral            # Different model
  %(prog)s models                                 # List available models
  %(prog)s serve --port 8000                      # Run the HTTP API
        """
    )
    parser.add_argument('--log-level',
                       default=os.getenv('LOG_LEVEL', 'INFO'),
                       choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                       help='Set logging level')
    parser.add_argument('--version',
                       action='version',
                       version='%(prog)s 0.1.0')
    sub = parser.add_subparsers(dest='command')

    chat = sub.add_parser('chat', help='Chat in the terminal')
    chat.add_argument('--session', default='cli', help='Session id used to persist history (default: cli)')
    chat.add_argument('--model', help='Model identifier, e.g. ollama/llama2 (default: last selection)')
    chat.add_argument('--message', help='Single message mode (non-interactive)')
    chat.add_argument('--quiet', action='store_true', help='Print only the response body')

    models = sub.add_parser('models', help='List models on the Ollama server')
    models.add_argument('--session', default=None, help='Session whose selection to mark')

    serve = sub.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--host', default=os.getenv('CHAT_API_HOST', '127.0.0.1'))
    serve.add_argument('--port', type=int, default=int(os.getenv('CHAT_API_PORT', '8000')))

    # No subcommand means interactive chat
    parser.set_defaults(command='chat', session='cli', model=None, message=None, quiet=False)
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(args.log_level, settings.log_format)
    logger = logging.getLogger(__name__)

    handlers = {'chat': _cmd_chat, 'models': _cmd_models, 'serve': _cmd_serve}
    try:
        container = build_container(settings)
        return handlers[args.command](args, container)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        return 0
    except Exception as e:
        logger.error(f"Application error: {e}")
        print(f"❌ Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
