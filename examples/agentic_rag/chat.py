"""
Ragora Python SDK - Agentic RAG Chat CLI

Interactive chat powered by Ragora agents.

Usage:
    # Create a new agent for a collection
    python chat.py --collection-id your-collection

    # Connect to an existing agent
    python chat.py --agent-id your-agent-id

    # Stream responses
    python chat.py --collection-id your-collection --stream

Environment Variables:
    RAGORA_API_KEY         Your Ragora API key
    RAGORA_BASE_URL        API base URL (default: https://api.ragora.app)
    RAGORA_COLLECTION_ID   Default collection ID
    RAGORA_AGENT_ID        Default agent ID
"""

import argparse
import os
import sys

from agent import AgenticRAGAgent
from ragora import RagoraError


ISATTY = sys.stdout.isatty()

RESET = "\033[0m" if ISATTY else ""
BOLD = "\033[1m" if ISATTY else ""
DIM = "\033[2m" if ISATTY else ""
RED = "\033[31m" if ISATTY else ""
GREEN = "\033[32m" if ISATTY else ""
YELLOW = "\033[33m" if ISATTY else ""
CYAN = "\033[36m" if ISATTY else ""


def colored(text: str, *codes: str) -> str:
    return f"{''.join(codes)}{text}{RESET}"


COMMANDS = {
    "/help": "Show available commands",
    "/quit": "Exit the chat",
    "/new": "Start a new conversation",
    "/sessions": "List conversation sessions",
    "/history": "Show messages in current session",
    "/stream": "Toggle streaming mode",
}


class ChatInterface:
    """Read-eval loop around an AgenticRAGAgent."""

    def __init__(self, agent: AgenticRAGAgent, stream: bool = False):
        self.agent = agent
        self.stream = stream

    def print_banner(self):
        print()
        print(colored("=== Ragora Agentic RAG Chat ===", CYAN, BOLD))
        print(colored(f"  Agent:   {self.agent.agent_id}", DIM))
        if self.agent.session_id:
            print(colored(f"  Session: {self.agent.session_id}", DIM))
        print(colored("  Type /help for commands, /quit to exit", DIM))
        print()

    def print_help(self):
        print()
        print(colored("Commands:", BOLD))
        for command, description in COMMANDS.items():
            print(f"  {colored(command, YELLOW):<20} {description}")
        print()

    def handle_command(self, command: str) -> bool:
        """Run a slash command; returns False when the user wants to quit."""
        command = command.lower().strip()

        if command in ("/quit", "/exit"):
            return False

        if command == "/help":
            self.print_help()
        elif command == "/new":
            self.agent.new_session()
            print(colored("\nStarted new conversation.\n", GREEN))
        elif command == "/sessions":
            self.show_sessions()
        elif command == "/history":
            self.show_history()
        elif command == "/stream":
            self.stream = not self.stream
            print(colored(f"\nStreaming: {'ON' if self.stream else 'OFF'}\n", YELLOW))
        else:
            print(colored(f"Unknown command: {command}. Type /help for help.", RED))
        return True

    def show_sessions(self):
        try:
            result = self.agent.list_sessions()
        except RagoraError as e:
            print(colored(f"\nError listing sessions: {e}\n", RED))
            return

        if not result.sessions:
            print(colored("\nNo sessions found.\n", DIM))
            return

        print(colored(f"\n{len(result.sessions)} session(s):", BOLD))
        for session in result.sessions:
            status_color = GREEN if session.status == "open" else DIM
            print(
                f"  {session.id[:12]}... [{colored(session.status, status_color)}] "
                f"{session.message_count} messages"
            )
        print()

    def show_history(self):
        if not self.agent.session_id:
            print(colored("\nNo active session. Send a message first.\n", DIM))
            return

        try:
            detail = self.agent.get_session(self.agent.session_id)
        except RagoraError as e:
            print(colored(f"\nError: {e}\n", RED))
            return

        if not detail.messages:
            print(colored("\nNo messages in session.\n", DIM))
            return

        print()
        for message in detail.messages:
            role_color = GREEN if message.role == "user" else CYAN
            print(f"  {colored(message.role, role_color, BOLD)}: {message.content[:200]}")
        print()

    def process_query(self, query: str):
        print()
        try:
            if self.stream:
                print(colored("Assistant:", BOLD))
                for chunk in self.agent.chat_stream(query):
                    if chunk.content:
                        sys.stdout.write(chunk.content)
                        sys.stdout.flush()
                print("\n")
            else:
                sys.stdout.write(colored("Thinking...", DIM))
                sys.stdout.flush()
                result = self.agent.chat(query)
                sys.stdout.write("\r\033[2K")
                print(colored("Assistant:", BOLD))
                print(result.message)
                if result.citations:
                    print(colored(f"\n  [{len(result.citations)} source(s)]", DIM))
                print()
        except RagoraError as e:
            print(colored(f"\nError: {e}\n", RED))

    def run(self):
        self.print_banner()

        while True:
            try:
                user_input = input(colored("You: ", GREEN)).strip()
            except (EOFError, KeyboardInterrupt):
                break

            if not user_input:
                continue
            if user_input.startswith("/"):
                if not self.handle_command(user_input):
                    break
                continue

            self.process_query(user_input)

        print(colored("\nGoodbye!\n", CYAN))


def parse_args():
    parser = argparse.ArgumentParser(description="Ragora Agentic RAG Chat")
    parser.add_argument("-c", "--collection-id", default=os.getenv("RAGORA_COLLECTION_ID"),
                        help="Collection ID to create an agent for")
    parser.add_argument("-a", "--agent-id", default=os.getenv("RAGORA_AGENT_ID"),
                        help="Existing agent ID to connect to")
    parser.add_argument("-n", "--name", default="RAG Agent", help="Agent name")
    parser.add_argument("--system-prompt", help="Custom system prompt")
    parser.add_argument("-s", "--stream", action="store_true", help="Enable streaming responses")
    return parser.parse_args()


def main():
    args = parse_args()

    if not args.agent_id and not args.collection_id:
        print(colored(
            "Error: --collection-id or --agent-id is required "
            "(or set RAGORA_COLLECTION_ID / RAGORA_AGENT_ID)",
            RED,
        ), file=sys.stderr)
        sys.exit(1)

    try:
        agent = AgenticRAGAgent.create(
            collection_id=args.collection_id,
            name=args.name,
            system_prompt=args.system_prompt,
            agent_id=args.agent_id,
        )
    except RagoraError as e:
        print(colored(f"Error creating agent: {e}", RED), file=sys.stderr)
        sys.exit(1)

    ChatInterface(agent, stream=args.stream).run()
    agent.client.close()


if __name__ == "__main__":
    main()
