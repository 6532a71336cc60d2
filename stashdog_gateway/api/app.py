"""FastAPI web application for the StashDog gateway."""

import logging
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from stashdog_gateway.api.dependencies import get_stashdog_client
from stashdog_gateway.api.dispatcher import (
    ToolArgumentError,
    ToolDispatcher,
    ToolResponse,
    UnknownToolError,
)
from stashdog_gateway.api.tools import TOOLS, ToolDefinition
from stashdog_gateway.integrations.stashdog import StashDogClient

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="StashDog Gateway",
    description="Natural-language tool gateway for the StashDog home inventory",
    version="0.1.0"
)


class ToolCallRequest(BaseModel):
    """Arguments for a tool call."""
    arguments: Dict[str, Any] = Field(default_factory=dict)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/tools", response_model=List[ToolDefinition])
async def list_tools():
    """List the tools an agent can call."""
    return TOOLS


@app.post("/tools/{tool_name}", response_model=ToolResponse)
def call_tool(
    tool_name: str,
    request: ToolCallRequest,
    client: StashDogClient = Depends(get_stashdog_client),
):
    """Run a tool with the given arguments."""
    dispatcher = ToolDispatcher(client)
    try:
        return dispatcher.call(tool_name, request.arguments)
    except UnknownToolError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ToolArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Tool {tool_name} failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error executing tool {tool_name}: {str(e)}")
