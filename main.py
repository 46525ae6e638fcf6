"""
Terminal chat with the example assistants.

Pick an agent from the menu (or pass --agent) and talk to it. Sessions are
persisted under sessions/, so rerunning with the same agent resumes the
previous conversation.

Usage:
    python main.py
    python main.py --agent "Trip Planner" --no-stream
"""

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from assistants.catalog import MENU_CHOICES, Collaborators, build_agent, resolve_agent_name, session_id_for
from utils.document_parser import AutoParser
from utils.http_client import HttpJsonClient
from utils.openai_models import ChatModel, EmbeddingModel, build_client
from utils.runtime_config import RuntimeOptions, add_runtime_args, runtime_options_from_args
from utils.session_store import SessionStore
from utils.terminal_chat import TerminalSession
from utils.trace_logger import TraceLogger
from utils.vector_store import RAMVec


logger = logging.getLogger("Assistant-Demo")

load_dotenv()


def build_collaborators(options: RuntimeOptions) -> Collaborators:
    """Wire the OpenAI, httpx, pypdf and in-memory vector adapters."""
    client = build_client()
    embeddings = EmbeddingModel(client, model = options.embedding_model)
    return Collaborators(
        llm_client = client,
        llm = ChatModel(client, model = options.model),
        http = HttpJsonClient(),
        parser = AutoParser(),
        vector_store = lambda namespace: RAMVec(namespace, embeddings),
        model = options.model,
        workdir = Path.cwd(),
    )


def choose_agent(options: RuntimeOptions, session: TerminalSession):
    """Agent from --agent, or from the menu on the main thread; None if input ended."""
    if options.agent:
        return resolve_agent_name(options.agent)
    return session.select_agent(MENU_CHOICES)


async def run(options: RuntimeOptions, session: TerminalSession, agent_name: str) -> int:
    """Open a chat with ``agent_name`` and drive the read loop."""
    agent = build_agent(agent_name, build_collaborators(options))
    store = SessionStore(
        session_dir = options.session_dir / agent.id,
        enabled = options.persist,
        metadata = {"agent": agent.id, "runtime_options": options.as_dict()},
    )
    chat = agent.chat(
        session_id = session_id_for(agent_name),
        persist = options.persist,
        store = store,
        stream = options.stream,
        trace_logger = TraceLogger(enabled = options.show_llm_response, logger = logger),
    )

    session.start(chat, agent.name)
    return await session.run()


def parse_args():
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed CLI arguments.
    """
    import argparse

    parser = argparse.ArgumentParser(description = "Chat with the example assistants in the terminal")
    add_runtime_args(parser)

    args = parser.parse_args()
    args.runtime_options = runtime_options_from_args(args)
    return args


def main():
    """
    Main function to run the terminal chat from command line.
    """
    args = parse_args()
    options = args.runtime_options

    logging.basicConfig(
        level = logging.INFO if options.show_llm_response else logging.WARNING,
        format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers = [logging.StreamHandler()],
    )

    session = TerminalSession()
    try:
        agent_name = choose_agent(options, session)
        if agent_name is None:
            return 0
        return asyncio.run(run(options, session, agent_name))
    except KeyboardInterrupt:
        session.close()
        return 0
    except (KeyError, FileNotFoundError, RuntimeError) as exc:
        logger.error(f"Startup failed: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
