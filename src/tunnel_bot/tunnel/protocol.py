"""Wire models for the tunneling agent's local status API.

ngrok answers ``GET /api/tunnels`` with::

    {"tunnels": [{"name": ..., "public_url": ..., "proto": ..., ...}], "uri": ...}

Only the fields below are consumed; anything else is ignored so newer
agent versions keep parsing.
"""

from pydantic import BaseModel, ConfigDict, Field


class AgentTunnel(BaseModel):
    """One tunnel descriptor as reported by the agent."""

    model_config = ConfigDict(extra="ignore")

    name: str
    public_url: str
    proto: str = ""


class AgentTunnelsResponse(BaseModel):
    """Response document of the agent's tunnels endpoint."""

    model_config = ConfigDict(extra="ignore")

    tunnels: list[AgentTunnel]
    uri: str = Field(default="")
