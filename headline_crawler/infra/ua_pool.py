"""User-Agent selection keyed by agent class."""

from __future__ import annotations

from ..config import AgentClass, UserAgents


class UserAgentPool:
    """Resolve the outbound User-Agent for a feed's agent selector."""

    def __init__(self, agents: UserAgents | None = None, contact: str = "", homepage: str = "") -> None:
        agents = agents or UserAgents()
        values = {"contact": contact, "homepage": homepage}
        self._uas: dict[AgentClass, str] = {
            AgentClass.CHROME: agents.chrome.format(**values),
            AgentClass.READER: agents.reader.format(**values),
            AgentClass.BOT: agents.bot.format(**values),
        }

    def get(self, selector: str | None) -> str:
        """Return the UA for ``selector``; unknown or empty selects the bot UA."""

        try:
            agent = AgentClass((selector or "").strip().lower())
        except ValueError:
            agent = AgentClass.BOT
        return self._uas[agent]


__all__ = ["UserAgentPool"]
