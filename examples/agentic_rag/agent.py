"""
Ragora Python SDK - Agentic RAG Agent

Thin wrapper around the agent endpoints. Knowledge search, memory and
compaction all run server-side; this class only tracks the session.

Usage:
    agent = AgenticRAGAgent.create(collection_id="my-collection")
    result = agent.chat("What are the key design choices?")
    print(result.message)
"""

from typing import Any, Dict, Iterator, Optional

from ragora import (
    AgentChatResponse,
    AgentChatStreamChunk,
    AgentSessionDetail,
    AgentSessionList,
    DeleteResponse,
    RagoraClient,
)


class AgenticRAGAgent:
    """A conversation with one Ragora agent."""

    def __init__(self, client: RagoraClient, agent_id: str, session_id: Optional[str] = None):
        self.client = client
        self.agent_id = agent_id
        self.session_id = session_id

    @classmethod
    def create(
        cls,
        collection_id: Optional[str] = None,
        name: str = "RAG Agent",
        system_prompt: Optional[str] = None,
        budget_config: Optional[Dict[str, Any]] = None,
        agent_id: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> "AgenticRAGAgent":
        """
        Connect to an existing agent, or create one for a collection.

        Raises:
            ValueError: If neither agent_id nor collection_id is given.
        """
        client = RagoraClient(api_key=api_key, base_url=base_url)

        if agent_id:
            client.get_agent(agent_id)
            return cls(client, agent_id)

        if not collection_id:
            raise ValueError("collection_id is required when creating a new agent")

        agent = client.create_agent(
            name,
            collection_ids=[collection_id],
            system_prompt=system_prompt,
            budget_config=budget_config,
        )
        return cls(client, agent.id)

    def chat(self, message: str) -> AgentChatResponse:
        """Send a message, continuing the current session."""
        response = self.client.agent_chat(self.agent_id, message, session_id=self.session_id)
        if response.session_id:
            self.session_id = response.session_id
        return response

    def chat_stream(self, message: str) -> Iterator[AgentChatStreamChunk]:
        """Stream a reply, picking up the session ID as it arrives."""
        with self.client.agent_chat_stream(
            self.agent_id, message, session_id=self.session_id
        ) as stream:
            for chunk in stream:
                if chunk.session_id:
                    self.session_id = chunk.session_id
                yield chunk

    def new_session(self) -> None:
        self.session_id = None

    def list_sessions(self) -> AgentSessionList:
        return self.client.list_agent_sessions(self.agent_id)

    def get_session(self, session_id: str) -> AgentSessionDetail:
        return self.client.get_agent_session(self.agent_id, session_id)

    def delete_session(self, session_id: str) -> DeleteResponse:
        return self.client.delete_agent_session(self.agent_id, session_id)
